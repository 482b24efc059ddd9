"""
Shape classification for Python type annotations.

Derives a schema from a type so callers can write
``deserialize(Book, text)`` instead of declaring the schema by hand:

- int, float, Decimal, bool, str        -> scalar
- dataclass, pydantic model, NamedTuple,
  TypedDict                             -> record (fields in declaration order)
- tuple[A, B, C]                        -> fixed sequence
- list[T], Sequence[T], tuple[T, ...]   -> growable sequence
- dict[K, V], Mapping[K, V]             -> map
- T | None, Optional[T]                 -> optional
"""

import collections.abc
import dataclasses
import functools
import logging
import types
import typing
from typing import Any

from pydantic import BaseModel, ValidationError

from .errors import make_schema_error
from .schema import (
    SCALAR_KIND_BY_TYPE,
    SCHEMA_TYPES,
    FieldSchema,
    FixedSequenceSchema,
    GrowableSequenceSchema,
    MapSchema,
    OptionalSchema,
    RecordSchema,
    ScalarSchema,
    Schema,
)

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def schema_for(tp: Any) -> Schema:
    """
    Classify a Python type annotation into a schema.

    Schemas are returned unchanged. Results for hashable types are cached.

    Raises:
        SchemaError: If the type has no matching shape or is self-referential
    """
    if isinstance(tp, SCHEMA_TYPES):
        return tp
    try:
        return _cached_schema_for(tp)
    except TypeError:
        # Unhashable annotation metadata, classify without the cache
        return _classify_root(tp)


@functools.lru_cache(maxsize=256)
def _cached_schema_for(tp: Any) -> Schema:
    schema = _classify_root(tp)
    logger.debug("Classified %r as %s", tp, schema.shape)
    return schema


def _classify_root(tp: Any) -> Schema:
    """Classify ``tp``, reporting rejected schema models as SchemaError."""
    try:
        return _classify(tp, frozenset())
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise make_schema_error(f"Cannot classify {tp!r}: {messages}") from e


def _classify(tp: Any, seen: frozenset[Any]) -> Schema:
    if isinstance(tp, SCHEMA_TYPES):
        return tp

    if isinstance(tp, type) and tp in SCALAR_KIND_BY_TYPE:
        return ScalarSchema(kind=SCALAR_KIND_BY_TYPE[tp])

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Annotated:
        return _classify(args[0], seen)

    if origin is typing.Union or origin is types.UnionType:
        return _classify_union(tp, args, seen)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return GrowableSequenceSchema(element=_classify(args[0], seen), as_tuple=True)
        if not args:
            raise make_schema_error(f"Cannot classify {tp!r}: tuple needs element types")
        return FixedSequenceSchema(elements=tuple(_classify(a, seen) for a in args))

    if origin in _SEQUENCE_ORIGINS:
        if len(args) != 1:
            raise make_schema_error(f"Cannot classify {tp!r}: sequence needs an element type")
        return GrowableSequenceSchema(element=_classify(args[0], seen))

    if origin in _MAPPING_ORIGINS:
        if len(args) != 2:
            raise make_schema_error(f"Cannot classify {tp!r}: mapping needs key and value types")
        return MapSchema(key=_classify(args[0], seen), value=_classify(args[1], seen))

    if isinstance(tp, type) and origin is None:
        return _classify_record(tp, seen)

    raise make_schema_error(f"Cannot classify {tp!r}: no matching shape")


def _classify_union(tp: Any, args: tuple[Any, ...], seen: frozenset[Any]) -> Schema:
    members = [a for a in args if a is not type(None)]
    if len(members) == len(args):
        raise make_schema_error(f"Cannot classify {tp!r}: only unions with None are supported")
    if len(members) != 1:
        raise make_schema_error(f"Cannot classify {tp!r}: optional must wrap exactly one type")
    return OptionalSchema(inner=_classify(members[0], seen))


def _classify_record(tp: type, seen: frozenset[Any]) -> RecordSchema:
    """Build a record schema from a class with ordered, annotated fields."""
    if tp in seen:
        raise make_schema_error(f"Cannot classify {tp.__name__}: type refers to itself")
    seen = seen | {tp}

    if dataclasses.is_dataclass(tp):
        hints = typing.get_type_hints(tp, include_extras=True)
        fields = [_field(f.name, hints[f.name], seen) for f in dataclasses.fields(tp) if f.init]
        return RecordSchema(name=tp.__name__, fields=tuple(fields), target=tp)

    if issubclass(tp, BaseModel):
        fields = [
            # Document keys use the alias; constructing by alias is pydantic's default
            _field(info.alias or name, info.annotation, seen)
            for name, info in tp.model_fields.items()
        ]
        return RecordSchema(name=tp.__name__, fields=tuple(fields), target=tp)

    if issubclass(tp, tuple) and hasattr(tp, "_fields"):
        hints = typing.get_type_hints(tp, include_extras=True)
        fields = [_field(name, hints[name], seen) for name in tp._fields]
        return RecordSchema(name=tp.__name__, fields=tuple(fields), target=tp)

    if typing.is_typeddict(tp):
        hints = typing.get_type_hints(tp, include_extras=True)
        fields = [_field(name, hint, seen) for name, hint in hints.items()]
        return RecordSchema(name=tp.__name__, fields=tuple(fields))

    raise make_schema_error(f"Cannot classify {tp.__name__}: no matching shape")


def _field(name: str, hint: Any, seen: frozenset[Any]) -> FieldSchema:
    return FieldSchema(name=name, type=_classify(hint, seen))
