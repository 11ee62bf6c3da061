# decoder.py — fitdecode frames → DecodedMessage, and the file → JSON entry point
#
# fitdecode applies scale/offset and subfield resolution itself; we hand the
# converter the raw values and the profile metadata instead so the conversion
# policy (raw vs scaled, valid-only, degrees) stays in one place.

import logging

import fitdecode

from .converter import Converter
from .errors import ConversionError, DecodeError
from .messages import (
    DecodedMessage,
    DeveloperField,
    Field,
    MessageDefinition,
    ReferenceField,
    SubField,
)
from .profile import BaseType, TIMESTAMP_FIELD_NUM

logger = logging.getLogger(__name__)


# ================== profile metadata ==================

def to_base_type(bt):
    """fitdecode BaseType (or FieldType wrapping one) → fitter BaseType."""
    if bt is None:
        return BaseType.BYTE
    if isinstance(bt, BaseType):
        return bt
    inner = getattr(bt, "base_type", None)
    if inner is not None and inner is not bt:
        return to_base_type(inner)
    found = BaseType.from_identifier(getattr(bt, "identifier", None))
    if found is None:
        found = BaseType.from_name(getattr(bt, "name", None))
    return found or BaseType.BYTE


def _type_name(t):
    return getattr(t, "name", None) or ""

def _units(f):
    return getattr(f, "units", None) or ""

def _scale(f):
    s = getattr(f, "scale", None)
    return float(s) if isinstance(s, (int, float)) and s else 1.0

def _offset(f):
    o = getattr(f, "offset", None)
    return float(o) if isinstance(o, (int, float)) else 0.0


def restore_invalid(raw, base_type):
    """fitdecode scrubs invalid values to None; put the wire sentinel back."""
    if raw is None:
        return base_type.invalid_value
    if isinstance(raw, tuple):
        return [base_type.invalid_value if v is None else v for v in raw]
    return raw


def _subfields(profile_field):
    out = []
    for sub in getattr(profile_field, "subfields", None) or ():
        refs = tuple(
            ReferenceField(num=ref.def_num, raw_value=ref.raw_value, name=getattr(ref, "name", "") or "")
            for ref in (getattr(sub, "ref_fields", None) or ())
        )
        out.append(SubField(
            name=sub.name,
            base_type=to_base_type(getattr(sub, "type", None)),
            units=_units(sub),
            scale=_scale(sub),
            offset=_offset(sub),
            profile_type=_type_name(getattr(sub, "type", None)),
            ref_fields=refs,
        ))
    return tuple(out)


# ================== frames ==================

def _field(fd):
    field_def = fd.field_def
    # when fitdecode picked a subfield, describe the parent and let the converter substitute
    profile_field = fd.parent_field if (fd.parent_field is not None and field_def is not None) else fd.field

    if field_def is not None:
        base_type = to_base_type(field_def.base_type)
        num = field_def.def_num
    else:
        base_type = to_base_type(getattr(profile_field, "type", None))
        num = getattr(profile_field, "def_num", None)

    if profile_field is None:
        return Field(num=num, name=f"unknown_{num}", value=restore_invalid(fd.raw_value, base_type),
                     base_type=base_type)

    # no definition: component expansion, except the compressed-header timestamp
    expanded = field_def is None and num != TIMESTAMP_FIELD_NUM

    return Field(
        num=num,
        name=profile_field.name,
        value=restore_invalid(fd.raw_value, base_type),
        base_type=base_type,
        units=_units(profile_field),
        scale=_scale(profile_field),
        offset=_offset(profile_field),
        profile_type=_type_name(getattr(profile_field, "type", None)),
        is_expanded=expanded,
        subfields=_subfields(profile_field) if not expanded else (),
    )


def message_from_frame(frame):
    """fitdecode.FitDataMessage → DecodedMessage."""
    fields, dev_fields = [], []
    for fd in frame.fields:
        field_def = fd.field_def
        if field_def is not None and getattr(field_def, "is_dev", False):
            base_type = to_base_type(getattr(fd.field, "type", None) or getattr(field_def, "base_type", None))
            dev_fields.append(DeveloperField(
                developer_data_index=field_def.dev_data_index,
                num=field_def.def_num,
                value=restore_invalid(fd.raw_value, base_type),
                base_type=base_type,
            ))
            continue
        fields.append(_field(fd))

    return DecodedMessage(num=frame.global_mesg_num, fields=fields, developer_fields=dev_fields,
                          name=getattr(frame, "name", None))


def definition_from_frame(frame):
    """fitdecode.FitDefinitionMessage → MessageDefinition."""
    return MessageDefinition(
        num=frame.global_mesg_num,
        local_num=getattr(frame, "local_mesg_num", 0),
        field_count=len(getattr(frame, "field_defs", None) or ()),
        developer_field_count=len(getattr(frame, "dev_field_defs", None) or ()),
    )


# ================== pipeline ==================

def feed(frames, conv):
    """Push decoder frames into a converter in wire order."""
    for frame in frames:
        if isinstance(frame, fitdecode.FitDefinitionMessage):
            conv.on_mesg_def(definition_from_frame(frame))
        elif isinstance(frame, fitdecode.FitDataMessage):
            conv.on_mesg(message_from_frame(frame))


def fit_to_json(fileish, options=None, check_crc=True):
    """Decode a FIT file (path, bytes stream or file object) into the enriched JSON string."""
    conv = Converter(options)
    crc = fitdecode.CrcCheck.ENABLED if check_crc else fitdecode.CrcCheck.DISABLED

    try:
        with fitdecode.FitReader(fileish, check_crc=crc) as fr:
            feed(fr, conv)
    except fitdecode.FitError as exc:
        raise DecodeError(f"decode failed: {exc}") from exc
    finally:
        conv.wait()  # the worker is released whatever happened while reading

    if conv.error is not None:
        raise ConversionError(f"convert done with error: {conv.error}") from conv.error
    return conv.result
