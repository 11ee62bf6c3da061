# descriptions.py — developer field descriptions seen so far in the file

import logging

from .messages import FieldDescription

logger = logging.getLogger(__name__)


def _text(x):
    return x.decode(errors="ignore") if isinstance(x, bytes) else x


def _name_parts(value):
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(_text(v)) for v in value if v not in (None, ""))
    return (str(_text(value)),)


def description_from_message(mesg):
    """Build a FieldDescription from a field_description message."""
    def raw(name):
        f = mesg.field_by_name(name)
        return f.value if f is not None else None

    units = raw("units")
    if isinstance(units, (list, tuple)):
        units = "|".join(_name_parts(units))
    return FieldDescription(
        developer_data_index=raw("developer_data_index"),
        field_definition_number=raw("field_definition_number"),
        field_name=_name_parts(raw("field_name")),
        units=_text(units) or "",
    )


class FieldDescriptionIndex:
    """Keyed by (developer_data_index, field_definition_number).

    FIT allows a description to be redefined; the latest one wins.
    """

    def __init__(self):
        self._by_key = {}

    def __len__(self):
        return len(self._by_key)

    def record(self, desc):
        key = (desc.developer_data_index, desc.field_definition_number)
        if key in self._by_key:
            logger.debug("field description %s redefined as %r", key, desc.name)
        self._by_key[key] = desc

    def resolve(self, developer_data_index, field_definition_number):
        return self._by_key.get((developer_data_index, field_definition_number))
