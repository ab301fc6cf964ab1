"""opts-core — decode flat name/value options into typed, schema-shaped records."""

from .config import DecodeConfig
from .decoder import decode
from .errors import (
    InvalidParameter,
    InvalidParameterValue,
    MissingParameter,
    OptsError,
    ProtocolError,
    SchemaError,
)
from .index import UnprocessedIndex
from .list_state import ListMode
from .options import OptionSource, RawOption
from .schema import FieldDef, StructDef
from .session import DecodeSession

__all__ = [
    "decode",
    "DecodeConfig",
    "DecodeSession",
    "OptionSource",
    "RawOption",
    "UnprocessedIndex",
    "ListMode",
    "FieldDef",
    "StructDef",
    "OptsError",
    "MissingParameter",
    "InvalidParameter",
    "InvalidParameterValue",
    "ProtocolError",
    "SchemaError",
]
