"""
Record reading for yamlizer.

Block-style mappings must list the record's fields in declaration order.
Flow-style mappings (``{name: Book, price: 819}``) are matched by name.
Optional fields may be left out in both styles.
"""

from typing import TYPE_CHECKING, Any

from ..errors import ConversionFailure, DuplicateKey, KeyMismatch
from ..lexer import Token, TokenKind
from ..schema import FieldSchema, RecordSchema
from .base import ReadResult


class RecordReaderMixin:
    """
    Mixin providing record reading.

    Note: This mixin expects to be combined with BaseReader via multiple inheritance.
    """

    if TYPE_CHECKING:
        token_at: Any
        match: Any
        expect: Any
        unexpected: Any
        error: Any
        read: Any
        read_key_text: Any
        flow_item_start: Any

    def read_record(self, schema: RecordSchema, pos: int, depth: int) -> ReadResult:
        """
        Read a record from a block or flow mapping.

        Raises:
            KeyMismatch: If a key is missing, misplaced or unknown
            DuplicateKey: If a flow mapping repeats a key
        """
        token = self.token_at(pos)
        if token.kind == TokenKind.BLOCK_MAPPING_START:
            return self._read_block_record(schema, token, pos + 1, depth)
        if token.kind == TokenKind.FLOW_MAPPING_START:
            return self._read_flow_record(schema, token, pos + 1, depth)
        raise self.unexpected(token, f"mapping for record '{schema.name}'")

    def _read_block_record(
        self, schema: RecordSchema, start: Token, pos: int, depth: int
    ) -> ReadResult:
        values: dict[str, Any] = {}

        for f in schema.fields:
            if f.is_optional and not self._at_key(pos, f.name):
                values[f.name] = None
                continue
            pos = self._expect_field_key(schema, f, pos)
            values[f.name], pos = self.read(f.type, pos, depth + 1)

        token = self.token_at(pos)
        if token.kind == TokenKind.KEY:
            key = self.token_at(pos + 1)
            raise self.error(
                KeyMismatch,
                f"Unexpected key {key.value!r} after the last field of record '{schema.name}'",
                key,
            )
        _, pos = self.expect(TokenKind.BLOCK_MAPPING_END, pos)
        return ReadResult(self.build_record(schema, values, start), pos)

    def _read_flow_record(
        self, schema: RecordSchema, start: Token, pos: int, depth: int
    ) -> ReadResult:
        values: dict[str, Any] = {}

        while True:
            at_end, pos = self.flow_item_start(
                pos, TokenKind.FLOW_MAPPING_END, not values, "flow mapping"
            )
            if at_end:
                break
            key_pos = pos
            key, pos = self.read_key_text(pos)
            key_token = self.token_at(key_pos + 1)
            f = schema.get_field(key)
            if f is None:
                raise self.error(
                    KeyMismatch, f"Unknown key {key!r} for record '{schema.name}'", key_token
                )
            if key in values:
                raise self.error(DuplicateKey, f"Duplicate key {key!r}", key_token)
            _, pos = self.expect(TokenKind.VALUE, pos, f"':' after key {key!r}")
            values[key], pos = self.read(f.type, pos, depth + 1)

        for f in schema.fields:
            if f.name in values:
                continue
            if not f.is_optional:
                raise self.error(
                    KeyMismatch, f"Missing field '{f.name}' in record '{schema.name}'", start
                )
            values[f.name] = None

        return ReadResult(self.build_record(schema, values, start), pos)

    def _at_key(self, pos: int, name: str) -> bool:
        """Check if ``pos`` starts a mapping entry whose key is ``name``."""
        if not self.match(pos, TokenKind.KEY):
            return False
        key = self.token_at(pos + 1)
        return key.kind == TokenKind.SCALAR and key.value == name

    def _expect_field_key(self, schema: RecordSchema, f: FieldSchema, pos: int) -> int:
        """Consume ``KEY scalar VALUE`` for field ``f`` and return the value position."""
        token = self.token_at(pos)
        if token.kind == TokenKind.BLOCK_MAPPING_END:
            raise self.error(
                KeyMismatch, f"Missing field '{f.name}' in record '{schema.name}'", token
            )

        key_token = self.token_at(pos + 1) if token.kind == TokenKind.KEY else token
        key, pos = self.read_key_text(pos)
        if key != f.name:
            raise self.error(
                KeyMismatch,
                f"Key does not match: expected '{f.name}', got {key!r} "
                f"(record '{schema.name}' fields must appear in declared order)",
                key_token,
            )
        _, pos = self.expect(TokenKind.VALUE, pos, f"':' after key '{f.name}'")
        return pos

    def build_record(self, schema: RecordSchema, values: dict[str, Any], token: Token) -> Any:
        """
        Build the record value from its fields.

        Returns a dict in declared field order when the schema has no target.

        Raises:
            ConversionFailure: If the target class rejects the values
        """
        ordered = {f.name: values[f.name] for f in schema.fields}
        if schema.target is None:
            return ordered
        try:
            return schema.target(**ordered)
        except (TypeError, ValueError) as e:
            raise self.error(
                ConversionFailure, f"Cannot build record '{schema.name}': {e}", token
            ) from e
