# profile.py — FIT profile constants used by the converter
# Base types (width, signedness, invalid sentinel), global message numbers,
# the FIT epoch and the profile type names that carry timestamps.

import enum
import math
from datetime import datetime, timezone

# FIT timestamps count seconds from 1989-12-31T00:00:00Z, not from the Unix epoch.
FIT_EPOCH = datetime(1989, 12, 31, tzinfo=timezone.utc)

SEMICIRCLES = "semicircles"
SEMICIRCLES_PER_180_DEG = 2**31

DATE_TIME_TYPES = frozenset({"date_time", "local_date_time"})

TIMESTAMP_FIELD_NUM = 253


class MesgNum(enum.IntEnum):
    SPORT = 12
    SESSION = 18
    LAP = 19
    RECORD = 20
    FIELD_DESCRIPTION = 206


class BaseType(enum.Enum):
    # name, identifier, bits, signed, kind, invalid
    ENUM = ("enum", 0x00, 8, False, "int", 0xFF)
    SINT8 = ("sint8", 0x01, 8, True, "int", 0x7F)
    UINT8 = ("uint8", 0x02, 8, False, "int", 0xFF)
    SINT16 = ("sint16", 0x83, 16, True, "int", 0x7FFF)
    UINT16 = ("uint16", 0x84, 16, False, "int", 0xFFFF)
    SINT32 = ("sint32", 0x85, 32, True, "int", 0x7FFFFFFF)
    UINT32 = ("uint32", 0x86, 32, False, "int", 0xFFFFFFFF)
    STRING = ("string", 0x07, 8, False, "string", "")
    FLOAT32 = ("float32", 0x88, 32, True, "float", None)
    FLOAT64 = ("float64", 0x89, 64, True, "float", None)
    UINT8Z = ("uint8z", 0x0A, 8, False, "int", 0)
    UINT16Z = ("uint16z", 0x8B, 16, False, "int", 0)
    UINT32Z = ("uint32z", 0x8C, 32, False, "int", 0)
    BYTE = ("byte", 0x0D, 8, False, "int", 0xFF)
    SINT64 = ("sint64", 0x8E, 64, True, "int", 0x7FFFFFFFFFFFFFFF)
    UINT64 = ("uint64", 0x8F, 64, False, "int", 0xFFFFFFFFFFFFFFFF)
    UINT64Z = ("uint64z", 0x90, 64, False, "int", 0)

    def __init__(self, type_name, identifier, bits, signed, kind, invalid):
        self.type_name = type_name
        self.identifier = identifier
        self.bits = bits
        self.signed = signed
        self.kind = kind
        self.invalid = invalid

    @property
    def is_integer(self):
        return self.kind == "int"

    @property
    def is_float(self):
        return self.kind == "float"

    @property
    def invalid_value(self):
        """Sentinel written on the wire for "no value"."""
        if self.is_float:
            return math.nan
        return self.invalid

    def is_valid(self, value):
        """Protocol validity check. Arrays are valid when any element is."""
        if isinstance(value, (bytes, bytearray)):
            value = list(value)
        if isinstance(value, (list, tuple)):
            return any(self.is_valid(v) for v in value)
        if value is None:
            return False
        if self.kind == "string":
            return isinstance(value, str) and value.strip("\x00") != ""
        if self.is_float:
            return not math.isnan(value)
        return value != self.invalid

    @classmethod
    def from_identifier(cls, identifier):
        for bt in cls:
            if bt.identifier == identifier:
                return bt
        return None

    @classmethod
    def from_name(cls, name):
        for bt in cls:
            if bt.type_name == name:
                return bt
        return None


def reinterpret_int(value, source, target):
    """Reinterpret an integer of base type *source* as base type *target*.

    The value is first read as a 64-bit pattern (sign-extended when *source*
    is signed), then truncated to the target width and read back with the
    target's signedness. Non-integer types are returned untouched.
    """
    if not (source.is_integer and target.is_integer) or isinstance(value, bool) or not isinstance(value, int):
        return value
    pattern = value & 0xFFFFFFFFFFFFFFFF
    mask = (1 << target.bits) - 1
    out = pattern & mask
    if target.signed and out >= 1 << (target.bits - 1):
        out -= 1 << target.bits
    return out
