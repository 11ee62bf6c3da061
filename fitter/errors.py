# errors.py — exception hierarchy for the FIT → JSON conversion


class FitterError(Exception):
    """Base class for every error raised by fitter."""


class DecodeError(FitterError):
    """The FIT decoder gave up before the end of the file."""


class ConversionError(FitterError):
    """A decoded message could not be turned into the JSON document."""


class SerializationError(ConversionError):
    """The assembled document could not be written as JSON."""


class IngestionClosedError(FitterError):
    """A message arrived after the producer side of the queue was closed."""
