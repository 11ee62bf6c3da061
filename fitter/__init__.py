"""fitter — FIT activity files to one JSON document with lap-level record averages."""

from .converter import Converter
from .decoder import fit_to_json
from .errors import (
    ConversionError,
    DecodeError,
    FitterError,
    IngestionClosedError,
    SerializationError,
)
from .messages import (
    DecodedMessage,
    DeveloperField,
    Field,
    FieldDescription,
    MessageDefinition,
    ReferenceField,
    SubField,
)
from .options import ConversionOptions
from .profile import BaseType, MesgNum

__version__ = "0.1.0"
