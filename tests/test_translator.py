"""
Tests for message translation and the field description index.
"""

import math

from conftest import field_description_message

from fitter.descriptions import FieldDescriptionIndex, description_from_message
from fitter.messages import FieldDescription
from fitter.profile import BaseType, MesgNum
from fitter.translator import MessageTranslator


def _translator(options, *descs):
    index = FieldDescriptionIndex()
    for d in descs:
        index.record(d)
    return MessageTranslator(options, index)


class TestFieldDescriptionIndex:
    def test_resolve(self, stryd_power):
        index = FieldDescriptionIndex()
        index.record(stryd_power)
        assert index.resolve(0, 7) is stryd_power
        assert index.resolve(1, 7) is None
        assert index.resolve(0, 8) is None

    def test_redefinition_wins(self):
        index = FieldDescriptionIndex()
        index.record(FieldDescription(0, 1, ("Old",)))
        index.record(FieldDescription(0, 1, ("New",)))
        assert index.resolve(0, 1).name == "New"
        assert len(index) == 1

    def test_from_message(self):
        desc = description_from_message(field_description_message(2, 9, "Leg Spring Stiffness", "KN/m"))
        assert desc == FieldDescription(2, 9, ("Leg Spring Stiffness",), "KN/m")

    def test_multi_part_name(self):
        desc = description_from_message(field_description_message(0, 1, ["Form", "Power"]))
        assert desc.name == "Form|Power"


class TestMessageTranslator:
    def test_fields_in_order(self, make_field, make_message, options):
        mesg = make_message(
            MesgNum.RECORD,
            make_field("heart_rate", 140, base_type=BaseType.UINT8, num=3),
            make_field("distance", 123456, base_type=BaseType.UINT32, num=5, scale=100.0),
        )
        out = _translator(options).translate(mesg)
        assert list(out) == ["heart_rate", "distance"]
        assert out["distance"] == 1234.56

    def test_expanded_fields_skipped(self, make_field, make_message, options):
        mesg = make_message(
            MesgNum.RECORD,
            make_field("enhanced_speed", 3000, base_type=BaseType.UINT32, num=73, scale=1000.0),
            make_field("speed", 3000, num=6, scale=1000.0, is_expanded=True),
        )
        assert _translator(options).translate(mesg) == {"enhanced_speed": 3.0}

    def test_developer_field_resolved(self, make_field, make_message, dev_field, options, stryd_power):
        mesg = make_message(
            MesgNum.RECORD,
            make_field("heart_rate", 140, base_type=BaseType.UINT8),
            developer_fields=[dev_field(0, 7, 305.0)],
        )
        out = _translator(options, stryd_power).translate(mesg)
        assert out == {"heart_rate": 140, "Power": 305.0}

    def test_unresolved_developer_field_dropped(self, make_field, make_message, dev_field, options, stryd_power):
        mesg = make_message(
            MesgNum.RECORD,
            make_field("heart_rate", 140, base_type=BaseType.UINT8),
            developer_fields=[dev_field(1, 7, 305.0), dev_field(0, 99, 1.0)],
        )
        assert _translator(options, stryd_power).translate(mesg) == {"heart_rate": 140}

    def test_developer_nan_dropped(self, make_message, dev_field, options, stryd_power):
        mesg = make_message(MesgNum.RECORD, developer_fields=[dev_field(0, 7, math.nan)])
        assert _translator(options, stryd_power).translate(mesg) is None

    def test_developer_value_not_scaled_by_options(self, make_message, dev_field, stryd_power, options):
        mesg = make_message(MesgNum.RECORD, developer_fields=[dev_field(0, 7, 12, BaseType.UINT16)])
        assert _translator(options, stryd_power).translate(mesg) == {"Power": 12}

    def test_nothing_survives(self, make_field, make_message, options):
        mesg = make_message(
            MesgNum.RECORD,
            make_field("grade", math.nan, base_type=BaseType.FLOAT32),
            make_field("speed", 1, is_expanded=True),
        )
        assert _translator(options).translate(mesg) is None

    def test_empty_message(self, make_message, options):
        assert _translator(options).translate(make_message(MesgNum.RECORD)) is None
