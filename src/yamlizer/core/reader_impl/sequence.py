"""
Sequence reading for yamlizer.

Handles fixed-arity sequences (tuples) and growable sequences (lists) in
three surface forms:

    - 1          [1, 2, 3]          key:
    - 2                             - 1
    - 3                             - 2

block, flow, and the indentless block form PyYAML emits for a sequence at
the same indentation as its parent key (no start or end markers).
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..errors import ArityMismatch
from ..lexer import Token, TokenKind
from ..schema import FixedSequenceSchema, GrowableSequenceSchema, Schema
from .base import ReadResult

# Returns the schema for element ``index``; the token is used for error location
ElementSchemaFn = Callable[[int, Token], Schema]


class SequenceReaderMixin:
    """
    Mixin providing fixed and growable sequence reading.

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

    def read_fixed_sequence(
        self, schema: FixedSequenceSchema, pos: int, depth: int
    ) -> ReadResult:
        """
        Read exactly ``schema.arity`` elements into a tuple.

        Raises:
            ArityMismatch: If the document has fewer or more elements
        """
        start = self.token_at(pos)

        def element_at(index: int, token: Token) -> Schema:
            if index >= schema.arity:
                raise self.error(
                    ArityMismatch,
                    f"Expected {schema.arity} elements, got more",
                    token,
                )
            return schema.elements[index]

        items, pos = self._read_items(pos, depth, element_at)
        if len(items) != schema.arity:
            raise self.error(
                ArityMismatch,
                f"Expected {schema.arity} elements, got {len(items)}",
                start,
            )
        return ReadResult(tuple(items), pos)

    def read_growable_sequence(
        self, schema: GrowableSequenceSchema, pos: int, depth: int
    ) -> ReadResult:
        """Read any number of elements, keeping document order."""
        items, pos = self._read_items(pos, depth, lambda index, token: schema.element)
        if schema.as_tuple:
            return ReadResult(tuple(items), pos)
        return ReadResult(items, pos)

    def _read_items(self, pos: int, depth: int, element_at: ElementSchemaFn) -> ReadResult:
        token = self.token_at(pos)
        if token.kind == TokenKind.BLOCK_SEQUENCE_START:
            return self._read_block_items(pos + 1, depth, element_at, indentless=False)
        # Indentless sequences start right after a mapping value indicator
        if token.kind == TokenKind.BLOCK_ENTRY and self.match(pos - 1, TokenKind.VALUE):
            return self._read_block_items(pos, depth, element_at, indentless=True)
        if token.kind == TokenKind.FLOW_SEQUENCE_START:
            return self._read_flow_items(pos + 1, depth, element_at)
        raise self.unexpected(token, "sequence")

    def _read_block_items(
        self, pos: int, depth: int, element_at: ElementSchemaFn, indentless: bool
    ) -> ReadResult:
        items: list[Any] = []
        while self.match(pos, TokenKind.BLOCK_ENTRY):
            element = element_at(len(items), self.token_at(pos))
            value, pos = self.read(element, pos + 1, depth + 1)
            items.append(value)

        # An indentless sequence ends at the first token that is not an entry
        if not indentless:
            _, pos = self.expect(
                TokenKind.BLOCK_SEQUENCE_END, pos, "'-' entry or end of sequence"
            )
        return ReadResult(items, pos)

    def _read_flow_items(self, pos: int, depth: int, element_at: ElementSchemaFn) -> ReadResult:
        items: list[Any] = []
        while True:
            at_end, pos = self.flow_item_start(
                pos, TokenKind.FLOW_SEQUENCE_END, not items, "flow sequence"
            )
            if at_end:
                return ReadResult(items, pos)
            element = element_at(len(items), self.token_at(pos))
            value, pos = self.read(element, pos, depth + 1)
            items.append(value)
