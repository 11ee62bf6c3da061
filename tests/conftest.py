"""
Shared builders for decoded FIT messages.
"""

import pytest

from fitter.messages import DecodedMessage, DeveloperField, Field, FieldDescription
from fitter.options import ConversionOptions
from fitter.profile import BaseType, MesgNum

# 2021-09-08T01:46:40Z in FIT seconds
T0 = 1_000_000_000
T0_ISO = "2021-09-08T01:46:40Z"


def timestamp_field(seconds, name="timestamp", num=253):
    return Field(num=num, name=name, value=seconds, base_type=BaseType.UINT32,
                 units="s", profile_type="date_time")


def record_message(seconds, **metrics):
    """Record at FIT time *seconds*; metrics are plain uint16 fields with scale 1."""
    fields = [timestamp_field(seconds)]
    for i, (name, value) in enumerate(metrics.items()):
        fields.append(Field(num=100 + i, name=name, value=value, base_type=BaseType.UINT16))
    return DecodedMessage(num=MesgNum.RECORD, fields=fields, name="record")


def lap_message(start_seconds, timer_seconds, **extra):
    fields = [
        timestamp_field(start_seconds + int(timer_seconds)),
        timestamp_field(start_seconds, name="start_time", num=2),
        Field(num=8, name="total_timer_time", value=int(timer_seconds * 1000),
              base_type=BaseType.UINT32, units="s", scale=1000.0),
    ]
    for i, (name, value) in enumerate(extra.items()):
        fields.append(Field(num=200 + i, name=name, value=value, base_type=BaseType.UINT16))
    return DecodedMessage(num=MesgNum.LAP, fields=fields, name="lap")


def field_description_message(dev_index, field_num, name, units=""):
    return DecodedMessage(
        num=MesgNum.FIELD_DESCRIPTION,
        name="field_description",
        fields=[
            Field(num=0, name="developer_data_index", value=dev_index, base_type=BaseType.UINT8),
            Field(num=1, name="field_definition_number", value=field_num, base_type=BaseType.UINT8),
            Field(num=3, name="field_name", value=name, base_type=BaseType.STRING),
            Field(num=8, name="units", value=units, base_type=BaseType.STRING),
        ],
    )


@pytest.fixture
def options():
    return ConversionOptions()


@pytest.fixture
def make_field():
    def make(name, value, base_type=BaseType.UINT16, num=0, **kw):
        return Field(num=num, name=name, value=value, base_type=base_type, **kw)
    return make


@pytest.fixture
def make_message():
    def make(num, *fields, developer_fields=()):
        return DecodedMessage(num=num, fields=list(fields), developer_fields=list(developer_fields))
    return make


@pytest.fixture
def dev_field():
    def make(dev_index, num, value, base_type=BaseType.FLOAT32):
        return DeveloperField(developer_data_index=dev_index, num=num, value=value, base_type=base_type)
    return make


@pytest.fixture
def stryd_power():
    return FieldDescription(developer_data_index=0, field_definition_number=7, field_name=("Power",), units="Watts")


@pytest.fixture
def activity_messages():
    """A short run: one description, session, sport, two 60 s laps and records every 30 s."""
    msgs = [
        field_description_message(0, 7, "Power", "Watts"),
        DecodedMessage(num=MesgNum.SESSION, name="session", fields=[
            timestamp_field(T0, name="start_time", num=2),
            Field(num=9, name="total_distance", value=40000, base_type=BaseType.UINT32, units="m", scale=100.0),
        ]),
        DecodedMessage(num=MesgNum.SPORT, name="sport", fields=[
            Field(num=3, name="name", value="Run", base_type=BaseType.STRING),
        ]),
    ]
    stance = [250, 260, 240, 230, 220]
    power = [300.0, 310.0, 280.0, 290.0, 330.0]
    for i, (st, pw) in enumerate(zip(stance, power)):
        rec = record_message(T0 + 30 * i, stance_time=st)
        rec.developer_fields.append(DeveloperField(0, 7, pw, BaseType.FLOAT32))
        msgs.append(rec)
    msgs.append(lap_message(T0, 60))
    msgs.append(lap_message(T0 + 60, 60))
    return msgs
