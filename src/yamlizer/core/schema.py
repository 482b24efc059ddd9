"""
yamlizer schema types.

A schema describes the shape of the value a document is read into. It is a
tagged variant: every model carries a ``shape`` discriminator and the reader
dispatches on it. Records list their fields explicitly and in order, which is
what block-style mappings are matched against.

All types are immutable (frozen=True) and hashable, so schemas can be shared
between calls and used as cache keys.
"""

from collections.abc import Iterable
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, ValidationError, field_serializer, field_validator

from .errors import make_schema_error

# =============================================================================
# Scalars
# =============================================================================


class ScalarKind(str, Enum):
    """Primitive types a scalar token can be converted into."""

    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOL = "bool"
    STR = "str"


SCALAR_KIND_BY_TYPE: dict[type, ScalarKind] = {
    int: ScalarKind.INT,
    float: ScalarKind.FLOAT,
    Decimal: ScalarKind.DECIMAL,
    bool: ScalarKind.BOOL,
    str: ScalarKind.STR,
}


class ScalarSchema(BaseModel):
    """
    A single scalar token converted to a primitive value.

    Examples:
        - int: ScalarSchema(kind=INT)
        - str: ScalarSchema(kind=STR)
    """

    shape: Literal["scalar"] = "scalar"
    kind: ScalarKind

    model_config = {"frozen": True}


# =============================================================================
# Records
# =============================================================================


class FieldSchema(BaseModel):
    """
    One named field of a record.

    Attributes:
        name: Document key, matched exactly and case-sensitively
        type: Schema of the field's value
    """

    name: str
    type: "Schema"

    model_config = {"frozen": True}

    @property
    def is_optional(self) -> bool:
        """Check if the field may be omitted from the document."""
        return isinstance(self.type, OptionalSchema)


class RecordSchema(BaseModel):
    """
    A fixed set of named fields, read from a mapping.

    Block-style mappings must list the keys in field order. Flow-style
    mappings are matched by name.

    Attributes:
        name: Record name used in error messages
        fields: Fields in declaration order
        target: Class called with the fields as keyword arguments;
            None builds a dict
    """

    shape: Literal["record"] = "record"
    name: str
    fields: tuple[FieldSchema, ...]
    target: Any = None

    model_config = {"frozen": True}

    @field_validator("fields")
    @classmethod
    def validate_unique_names(cls, v: tuple[FieldSchema, ...]) -> tuple[FieldSchema, ...]:
        """Ensure no field name is declared twice."""
        seen: set[str] = set()
        for f in v:
            if f.name in seen:
                raise ValueError(f"Field '{f.name}' is declared more than once")
            seen.add(f.name)
        return v

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: Any) -> Any:
        if v is not None and not callable(v):
            raise ValueError(f"Record target {v!r} is not callable")
        return v

    @field_serializer("target")
    def serialize_target(self, v: Any) -> str | None:
        """Serialize the target class as a ``module:qualname`` reference."""
        if v is None:
            return None
        return f"{v.__module__}:{getattr(v, '__qualname__', repr(v))}"

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldSchema | None:
        """Get field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


# =============================================================================
# Sequences and maps
# =============================================================================


class FixedSequenceSchema(BaseModel):
    """
    A fixed-arity, heterogeneous sequence read into a tuple.

    Element ``i`` of the document is read with ``elements[i]``.
    """

    shape: Literal["fixed_sequence"] = "fixed_sequence"
    elements: tuple["Schema", ...]

    model_config = {"frozen": True}

    @property
    def arity(self) -> int:
        return len(self.elements)


class GrowableSequenceSchema(BaseModel):
    """
    A homogeneous sequence of any length.

    Attributes:
        element: Schema of every element
        as_tuple: Build a tuple instead of a list
    """

    shape: Literal["growable_sequence"] = "growable_sequence"
    element: "Schema"
    as_tuple: bool = False

    model_config = {"frozen": True}


class MapSchema(BaseModel):
    """
    A mapping with unique keys read into a dict.

    Keys must produce hashable values, so only scalar and fixed-sequence key
    schemas are accepted.
    """

    shape: Literal["map"] = "map"
    key: "Schema"
    value: "Schema"

    model_config = {"frozen": True}

    @field_validator("key")
    @classmethod
    def validate_key_shape(cls, v: "Schema") -> "Schema":
        if v.shape not in ("scalar", "fixed_sequence"):
            raise ValueError(f"Map keys must be scalars or fixed sequences, not {v.shape}")
        return v


class OptionalSchema(BaseModel):
    """
    A value that may be absent.

    Reading falls back to None, with the position unchanged, whenever the
    inner schema fails to read.
    """

    shape: Literal["optional"] = "optional"
    inner: "Schema"

    model_config = {"frozen": True}


Schema = Annotated[
    Union[
        ScalarSchema,
        RecordSchema,
        FixedSequenceSchema,
        GrowableSequenceSchema,
        MapSchema,
        OptionalSchema,
    ],
    Field(discriminator="shape"),
]

SCHEMA_TYPES = (
    ScalarSchema,
    RecordSchema,
    FixedSequenceSchema,
    GrowableSequenceSchema,
    MapSchema,
    OptionalSchema,
)

FieldSchema.model_rebuild()
RecordSchema.model_rebuild()
FixedSequenceSchema.model_rebuild()
GrowableSequenceSchema.model_rebuild()
MapSchema.model_rebuild()
OptionalSchema.model_rebuild()


# =============================================================================
# Constructors
# =============================================================================


def _coerce(value: Any) -> Schema:
    """Accept a schema or a Python type annotation."""
    if isinstance(value, SCHEMA_TYPES):
        return value
    from .classifier import schema_for

    return schema_for(value)


def _build(model: type[BaseModel], **kwargs: Any) -> Any:
    try:
        return model(**kwargs)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise make_schema_error(f"Invalid {model.__name__}: {messages}") from e


def scalar(kind: ScalarKind | type) -> ScalarSchema:
    """
    Build a scalar schema from a ScalarKind or a primitive type.

    Examples:
        scalar(int), scalar(ScalarKind.STR)
    """
    if isinstance(kind, ScalarKind):
        return ScalarSchema(kind=kind)
    if kind not in SCALAR_KIND_BY_TYPE:
        raise make_schema_error(f"{kind!r} is not a scalar type")
    return ScalarSchema(kind=SCALAR_KIND_BY_TYPE[kind])


def field(name: str, type: Any) -> FieldSchema:
    """Declare one record field. ``type`` is a schema or a Python type."""
    return _build(FieldSchema, name=name, type=_coerce(type))


def record(
    name: str,
    fields: Iterable[FieldSchema | tuple[str, Any]],
    target: Any = None,
) -> RecordSchema:
    """
    Declare a record with an explicit, ordered field list.

    Examples:
        record("book", [("name", str), ("price", int)])
        record("book", [field("name", str), field("price", int)], target=Book)
    """
    declared = [f if isinstance(f, FieldSchema) else field(f[0], f[1]) for f in fields]
    return _build(RecordSchema, name=name, fields=tuple(declared), target=target)


def fixed(*elements: Any) -> FixedSequenceSchema:
    """Declare a fixed-arity sequence, e.g. ``fixed(int, float, str)``."""
    return _build(FixedSequenceSchema, elements=tuple(_coerce(e) for e in elements))


def sequence(element: Any, as_tuple: bool = False) -> GrowableSequenceSchema:
    """Declare a growable sequence, e.g. ``sequence(str)``."""
    return _build(GrowableSequenceSchema, element=_coerce(element), as_tuple=as_tuple)


def mapping(key: Any, value: Any) -> MapSchema:
    """Declare a map, e.g. ``mapping(str, int)``."""
    return _build(MapSchema, key=_coerce(key), value=_coerce(value))


def optional(inner: Any) -> OptionalSchema:
    """Declare an optional value, e.g. ``optional(int)``."""
    return _build(OptionalSchema, inner=_coerce(inner))


def describe(schema: Schema) -> str:
    """
    Render a schema as a compact type expression.

    Examples:
        record book{name: str, price: int}, list[str], (int, float), dict[str, int]
    """
    match schema:
        case ScalarSchema(kind=kind):
            return kind.value
        case OptionalSchema(inner=inner):
            return f"{describe(inner)}?"
        case RecordSchema(name=name, fields=fields):
            body = ", ".join(f"{f.name}: {describe(f.type)}" for f in fields)
            return f"record {name}{{{body}}}"
        case MapSchema(key=key, value=value):
            return f"dict[{describe(key)}, {describe(value)}]"
        case FixedSequenceSchema(elements=elements):
            return "(" + ", ".join(describe(e) for e in elements) + ")"
        case GrowableSequenceSchema(element=element, as_tuple=as_tuple):
            container = "tuple" if as_tuple else "list"
            return f"{container}[{describe(element)}]"
    raise make_schema_error(f"Unknown schema {schema!r}")
