# options.py — conversion settings
# Defaults mirror the command line: pretty JSON, scaled values, records included.

import dataclasses
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_BUFFER_SIZE = 1000
ENV_PREFIX = "FITTER_"

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def env_or_default(key, default, environ=None):
    """Typed environment lookup; the type of *default* decides the parsing.

    Missing or unparsable values fall back to *default*.
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(key)
    if raw is None:
        return default
    raw = raw.strip()
    if isinstance(default, bool):
        low = raw.lower()
        if low in _TRUE:
            return True
        if low in _FALSE:
            return False
        logger.warning("ignoring %s=%r: not a boolean", key, raw)
        return default
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            logger.warning("ignoring %s=%r: not an integer", key, raw)
            return default
    if isinstance(default, str):
        return raw
    return default


@dataclass(frozen=True)
class ConversionOptions:
    channel_buffer_size: int = DEFAULT_CHANNEL_BUFFER_SIZE
    use_raw_value: bool = False                  # raw wire value instead of scaled
    print_only_valid_value: bool = False         # drop protocol "invalid" sentinels
    print_gps_position_in_degrees: bool = False  # lat/long in degrees instead of semicircles
    pretty_print: bool = True
    no_records: bool = False                     # leave out the high-resolution "records" array

    def __post_init__(self):
        if self.channel_buffer_size <= 0:
            object.__setattr__(self, "channel_buffer_size", DEFAULT_CHANNEL_BUFFER_SIZE)

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, environ=None, **overrides):
        """Options from FITTER_* environment variables; keyword overrides win."""
        values = {}
        for f in dataclasses.fields(cls):
            values[f.name] = env_or_default(ENV_PREFIX + f.name.upper(), f.default, environ)
        values.update(overrides)
        return cls(**values)
