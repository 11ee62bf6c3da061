# values.py — one decoded field → one JSON-safe value
#
# Order of operations for a field:
#   validity filter → subfield substitution → arrays | scalar conversion → NaN/Inf filter
# Scalars go through exactly one entry of CONVERTERS, picked by value_kind().

import enum
import math
from collections import namedtuple
from datetime import timedelta

import numpy as np

from .profile import (
    BaseType,
    DATE_TIME_TYPES,
    FIT_EPOCH,
    SEMICIRCLES,
    SEMICIRCLES_PER_180_DEG,
    reinterpret_int,
)

# ================== helpers ==================

def to_text(x): return x.decode(errors="ignore") if isinstance(x, (bytes, bytearray)) else x

def semicircles_to_deg(v):
    return float(v) * (180.0 / SEMICIRCLES_PER_180_DEG) if v is not None else None

def fit_time_to_rfc3339(v):
    """Seconds since the FIT epoch → RFC 3339 UTC string."""
    return (FIT_EPOCH + timedelta(seconds=int(v))).strftime("%Y-%m-%dT%H:%M:%SZ")

def narrow_float32(v):
    # shortest decimal that round-trips through float32 (1.1, not 1.100000023841858)
    return float(str(np.float32(v)))

def apply_scale_offset(value, scale, offset):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    scale = scale or 1.0
    offset = offset or 0.0
    if scale == 1 and offset == 0:
        return value
    return value / scale - offset

def is_finite(value):
    if isinstance(value, float):
        return math.isfinite(value)
    return True

def is_array(value):
    return isinstance(value, (list, tuple, bytes, bytearray))

def json_array(values, base_type):
    """Homogeneous JSON list; byte arrays become ints, non-finite floats are dropped."""
    if isinstance(values, (bytes, bytearray)):
        return [int(v) for v in values]
    if base_type.kind == "string" or any(isinstance(v, str) for v in values):
        return [str(to_text(v)) for v in values if v is not None]
    if base_type.is_float or any(isinstance(v, float) for v in values):
        arr = np.asarray(values, dtype=np.float64)
        arr = arr[np.isfinite(arr)]
        if base_type is BaseType.FLOAT32:
            return [narrow_float32(v) for v in arr]
        return arr.tolist()
    return [int(v) for v in values if v is not None]

# ================== scalar conversion table ==================

class ValueKind(enum.Enum):
    PLAIN = "plain"
    DATE_TIME = "date_time"
    SEMICIRCLES = "semicircles"
    STRING = "string"


# field after subfield substitution
Resolved = namedtuple("Resolved", "name units scale offset profile_type base_type value")


def resolve(field, mesg=None):
    sub = field.resolve_subfield(mesg) if (mesg is not None and field.subfields) else None
    if sub is None:
        return Resolved(field.name, field.units, field.scale, field.offset,
                        field.profile_type, field.base_type, field.value)
    return Resolved(sub.name, sub.units, sub.scale, sub.offset, sub.profile_type, sub.base_type,
                    reinterpret_int(field.value, field.base_type, sub.base_type))


def _is_number(v):
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def value_kind(r, options):
    # precedence: string > date_time > semicircles > plain
    if r.base_type is BaseType.STRING or isinstance(r.value, (str, bytes, bytearray)):
        return ValueKind.STRING
    if r.profile_type in DATE_TIME_TYPES and isinstance(r.value, int) and not isinstance(r.value, bool):
        return ValueKind.DATE_TIME
    if options.print_gps_position_in_degrees and r.units == SEMICIRCLES and _is_number(r.value):
        return ValueKind.SEMICIRCLES
    return ValueKind.PLAIN


def _plain(r, options):
    scaled = (r.scale or 1.0) != 1 or (r.offset or 0.0) != 0
    if scaled and not options.use_raw_value:
        return apply_scale_offset(r.value, r.scale, r.offset)
    value = r.value
    if r.base_type is BaseType.FLOAT32 and isinstance(value, float) and math.isfinite(value):
        value = narrow_float32(value)
    return value


def _date_time(r, options):
    return fit_time_to_rfc3339(r.value)


def _semicircles(r, options):
    return semicircles_to_deg(reinterpret_int(r.value, r.base_type, BaseType.SINT32))


def _string(r, options):
    return str(to_text(r.value)).rstrip("\x00")


CONVERTERS = {
    ValueKind.PLAIN: _plain,
    ValueKind.DATE_TIME: _date_time,
    ValueKind.SEMICIRCLES: _semicircles,
    ValueKind.STRING: _string,
}

# ================== public ==================

def project_field(field, mesg, options):
    """(name, value) for one decoded field, or None when the field is dropped."""
    if options.print_only_valid_value and not field.base_type.is_valid(field.value):
        return None

    r = resolve(field, mesg)
    if r.value is None:
        return None

    if is_array(r.value) and r.base_type is not BaseType.STRING:
        return r.name, json_array(r.value, r.base_type)
    if isinstance(r.value, (list, tuple)):
        return r.name, json_array(r.value, BaseType.STRING)

    value = CONVERTERS[value_kind(r, options)](r, options)
    if not is_finite(value):
        return None
    return r.name, value


def project_developer_value(value, base_type):
    """Developer values are never scaled; arrays and NaN are handled like standard fields."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)) or (is_array(value) and base_type is not BaseType.STRING):
        return json_array(value, base_type)
    if isinstance(value, (bytes, bytearray)):
        return str(to_text(value)).rstrip("\x00")
    if base_type is BaseType.FLOAT32 and isinstance(value, float) and math.isfinite(value):
        value = narrow_float32(value)
    return value if is_finite(value) else None
