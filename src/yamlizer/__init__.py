"""
yamlizer - read YAML documents straight into typed Python values.

The document's tokens are matched against a schema (declared explicitly or
derived from a type annotation) and the value is built directly, with no
intermediate document tree.

Usage:
    from dataclasses import dataclass
    from yamlizer import deserialize

    @dataclass
    class Book:
        name: str
        price: int

    deserialize(Book, "name: Book\\nprice: 819\\n")
"""

from __future__ import annotations

from ._version import get_version
from .core.classifier import schema_for
from .core.deserialize import deserialize, deserialize_file
from .core.errors import (
    ArityMismatch,
    ConversionFailure,
    DeserializeError,
    DuplicateKey,
    KeyMismatch,
    NestingTooDeep,
    ScanError,
    SchemaError,
    UnexpectedEnd,
    UnexpectedTokenKind,
    YamlizerError,
)
from .core.schema import (
    ScalarKind,
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
from .core.settings import ReaderSettings, load_settings

__version__ = get_version()

__all__ = [
    "__version__",
    "deserialize",
    "deserialize_file",
    "schema_for",
    # Schemas
    "Schema",
    "ScalarKind",
    "scalar",
    "field",
    "record",
    "fixed",
    "sequence",
    "mapping",
    "optional",
    "describe",
    # Settings
    "ReaderSettings",
    "load_settings",
    # Errors
    "YamlizerError",
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
