"""
Map reading for yamlizer.

Reads block (``key: value`` lines) and flow (``{key: value}``) mappings into
a dict. Key uniqueness is checked by the insertion itself.
"""

from typing import TYPE_CHECKING, Any

from ..errors import ConversionFailure, DuplicateKey
from ..lexer import Token, TokenKind
from ..schema import MapSchema
from .base import ReadResult


class MappingReaderMixin:
    """
    Mixin providing map reading.

    Note: This mixin expects to be combined with BaseReader via multiple inheritance.
    """

    if TYPE_CHECKING:
        token_at: Any
        match: Any
        expect: Any
        unexpected: Any
        error: Any
        read: Any
        flow_item_start: Any

    def read_map(self, schema: MapSchema, pos: int, depth: int) -> ReadResult:
        """
        Read a block or flow mapping into a dict.

        Raises:
            DuplicateKey: If a key occurs twice
        """
        token = self.token_at(pos)
        result: dict[Any, Any] = {}

        if token.kind == TokenKind.BLOCK_MAPPING_START:
            pos += 1
            while not self.match(pos, TokenKind.BLOCK_MAPPING_END):
                pos = self._read_entry(schema, result, pos, depth)
            return ReadResult(result, pos + 1)

        if token.kind == TokenKind.FLOW_MAPPING_START:
            pos += 1
            while True:
                at_end, pos = self.flow_item_start(
                    pos, TokenKind.FLOW_MAPPING_END, not result, "flow mapping"
                )
                if at_end:
                    return ReadResult(result, pos)
                pos = self._read_entry(schema, result, pos, depth)

        raise self.unexpected(token, "mapping")

    def _read_entry(self, schema: MapSchema, result: dict[Any, Any], pos: int, depth: int) -> int:
        """Read ``KEY key VALUE value``, insert it, and return the next position."""
        _, pos = self.expect(TokenKind.KEY, pos, "mapping key or end of mapping")
        key_token = self.token_at(pos)
        key, pos = self.read(schema.key, pos, depth + 1)
        _, pos = self.expect(TokenKind.VALUE, pos, "':' after mapping key")
        value, pos = self.read(schema.value, pos, depth + 1)
        self._insert(result, key, value, key_token)
        return pos

    def _insert(self, result: dict[Any, Any], key: Any, value: Any, token: Token) -> None:
        size = len(result)
        try:
            result.setdefault(key, value)
        except TypeError as e:
            raise self.error(
                ConversionFailure, f"Mapping key {key!r} is not hashable", token
            ) from e
        if len(result) == size:
            raise self.error(DuplicateKey, f"Duplicate key {key!r}", token)
