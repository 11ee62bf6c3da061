# translator.py — one decoded message → {field name: JSON value}

import logging

from .values import project_developer_value, project_field

logger = logging.getLogger(__name__)


class MessageTranslator:
    def __init__(self, options, descriptions):
        self.options = options
        self.descriptions = descriptions

    def translate(self, mesg):
        """Translated mapping, or None when no field survived."""
        out = {}

        for field in mesg.fields:
            if field.is_expanded:  # derived by component expansion, duplicates its source
                continue
            projected = project_field(field, mesg, self.options)
            if projected is None:
                continue
            name, value = projected
            out[name] = value

        for dev in mesg.developer_fields:
            desc = self.descriptions.resolve(dev.developer_data_index, dev.num)
            if desc is None:
                logger.debug("no field description for developer field (%s, %s), dropping",
                             dev.developer_data_index, dev.num)
                continue
            value = project_developer_value(dev.value, dev.base_type)
            if value is None:
                continue
            out[desc.name] = value

        return out or None
