"""Core yamlizer functionality: token source, schemas, shape classification, reader."""

from .classifier import schema_for
from .deserialize import deserialize, deserialize_file
from .errors import (
    ArityMismatch,
    ConversionFailure,
    DeserializeError,
    DuplicateKey,
    ErrorContext,
    KeyMismatch,
    NestingTooDeep,
    ScanError,
    SchemaError,
    UnexpectedEnd,
    UnexpectedTokenKind,
    YamlizerError,
)
from .lexer import Token, TokenKind, TokenStream, tokenize
from .schema import (
    FieldSchema,
    FixedSequenceSchema,
    GrowableSequenceSchema,
    MapSchema,
    OptionalSchema,
    RecordSchema,
    ScalarKind,
    ScalarSchema,
    Schema,
    describe,
    field,
    fixed,
    mapping,
    optional,
    record,
    scalar,
    sequence,
)
from .settings import ReaderSettings, load_settings

__all__ = [
    # Entry points
    "deserialize",
    "deserialize_file",
    "schema_for",
    # Schemas
    "Schema",
    "ScalarKind",
    "ScalarSchema",
    "FieldSchema",
    "RecordSchema",
    "FixedSequenceSchema",
    "GrowableSequenceSchema",
    "MapSchema",
    "OptionalSchema",
    "scalar",
    "field",
    "record",
    "fixed",
    "sequence",
    "mapping",
    "optional",
    "describe",
    # Tokens
    "Token",
    "TokenKind",
    "TokenStream",
    "tokenize",
    # Settings
    "ReaderSettings",
    "load_settings",
    # Errors
    "YamlizerError",
    "ErrorContext",
    "SchemaError",
    "ScanError",
    "DeserializeError",
    "UnexpectedTokenKind",
    "KeyMismatch",
    "ArityMismatch",
    "DuplicateKey",
    "ConversionFailure",
    "UnexpectedEnd",
    "NestingTooDeep",
]
