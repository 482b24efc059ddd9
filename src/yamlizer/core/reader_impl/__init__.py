"""
yamlizer reader package.

The reader is built from mixins, one per schema shape, combined with the
token utilities in BaseReader. Reader.read() is the single dispatch point:
every container reader calls back into it for its elements.

The main exports are:
- Reader: The complete reader class
- ReadResult: (value, position) pair returned by every read
- read_document: Read a whole token stream into a value

Usage:
    from yamlizer.core.lexer import TokenStream
    from yamlizer.core.reader_impl import read_document

    with TokenStream(text) as stream:
        value = read_document(schema, stream)
"""

from ..errors import NestingTooDeep
from ..lexer import TokenKind, TokenStream
from ..schema import (
    FixedSequenceSchema,
    GrowableSequenceSchema,
    MapSchema,
    OptionalSchema,
    RecordSchema,
    ScalarSchema,
    Schema,
)
from ..settings import ReaderSettings
from .base import BaseReader, ReaderProtocol, ReadResult
from .mapping import MappingReaderMixin
from .optional import OptionalReaderMixin
from .record import RecordReaderMixin
from .scalar import ScalarReaderMixin
from .sequence import SequenceReaderMixin


class Reader(
    BaseReader,
    ScalarReaderMixin,
    OptionalReaderMixin,
    RecordReaderMixin,
    MappingReaderMixin,
    SequenceReaderMixin,
):
    """
    Complete schema-directed reader.

    Each mixin reads one shape:

    - ScalarReaderMixin: scalar tokens converted to primitives
    - OptionalReaderMixin: inner value or None with full rollback
    - RecordReaderMixin: named fields from block or flow mappings
    - MappingReaderMixin: dicts from block or flow mappings
    - SequenceReaderMixin: tuples and lists from block or flow sequences
    """

    def read(self, schema: Schema, pos: int, depth: int = 0) -> ReadResult:
        """
        Read one value of ``schema`` starting at ``pos``.

        Args:
            schema: Shape of the value to read
            pos: Stream position of the value's first token
            depth: Collection nesting depth of this value

        Returns:
            ReadResult of the value and the position after it

        Raises:
            DeserializeError: If the tokens do not fit the schema
        """
        if depth > self.settings.max_depth:
            raise self.error(
                NestingTooDeep,
                f"Collections nested deeper than {self.settings.max_depth} levels",
                self.token_at(pos),
            )

        match schema:
            case ScalarSchema():
                return self.read_scalar(schema, pos)
            case OptionalSchema():
                return self.read_optional(schema, pos, depth)
            case RecordSchema():
                return self.read_record(schema, pos, depth)
            case MapSchema():
                return self.read_map(schema, pos, depth)
            case FixedSequenceSchema():
                return self.read_fixed_sequence(schema, pos, depth)
            case GrowableSequenceSchema():
                return self.read_growable_sequence(schema, pos, depth)
        raise TypeError(f"Not a schema: {schema!r}")

    def read_document(self, schema: Schema) -> ReadResult:
        """
        Read ``STREAM_START value STREAM_END``.

        Returns:
            ReadResult of the value and the position after the stream end
        """
        _, pos = self.expect(TokenKind.STREAM_START, 0)
        value, pos = self.read(schema, pos)
        _, pos = self.expect(TokenKind.STREAM_END, pos, "end of stream after the value")
        return ReadResult(value, pos)


def read_document(
    schema: Schema, stream: TokenStream, settings: ReaderSettings | None = None
) -> object:
    """
    Convenience function to read a whole token stream.

    Args:
        schema: Schema of the root value
        stream: Token stream positioned at its start
        settings: Reader limits

    Returns:
        The root value
    """
    reader = Reader(stream, settings)
    return reader.read_document(schema).value


__all__ = [
    "BaseReader",
    "Reader",
    "ReaderProtocol",
    "ReadResult",
    "read_document",
]
