# messages.py — decoded FIT messages as handed over by the decoder
# Values are raw (unscaled) wire values; the projector in values.py turns them into JSON.

from dataclasses import dataclass, field as dc_field
from typing import Any, Optional, Tuple

from .profile import BaseType


@dataclass(frozen=True)
class ReferenceField:
    num: int
    raw_value: Any
    name: str = ""


@dataclass(frozen=True)
class SubField:
    name: str
    base_type: BaseType
    units: str = ""
    scale: float = 1.0
    offset: float = 0.0
    profile_type: str = ""
    ref_fields: Tuple[ReferenceField, ...] = ()


@dataclass
class Field:
    num: int
    name: str
    value: Any
    base_type: BaseType
    units: str = ""
    scale: float = 1.0
    offset: float = 0.0
    profile_type: str = ""
    is_expanded: bool = False
    subfields: Tuple[SubField, ...] = ()

    def resolve_subfield(self, mesg):
        """First subfield whose reference field matches a sibling's raw value."""
        for sub in self.subfields:
            for ref in sub.ref_fields:
                sibling = mesg.field_by_num(ref.num)
                if sibling is not None and sibling.value == ref.raw_value:
                    return sub
        return None


@dataclass
class DeveloperField:
    developer_data_index: int
    num: int
    value: Any
    base_type: BaseType = BaseType.BYTE


@dataclass(frozen=True)
class FieldDescription:
    developer_data_index: int
    field_definition_number: int
    field_name: Tuple[str, ...] = ()
    units: str = ""

    @property
    def name(self):
        return "|".join(self.field_name)


@dataclass
class DecodedMessage:
    num: int
    fields: list = dc_field(default_factory=list)
    developer_fields: list = dc_field(default_factory=list)
    name: Optional[str] = None

    def field_by_num(self, num):
        for f in self.fields:
            if f.num == num and not f.is_expanded:
                return f
        return None

    def field_by_name(self, name):
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class MessageDefinition:
    num: int
    local_num: int = 0
    field_count: int = 0
    developer_field_count: int = 0
