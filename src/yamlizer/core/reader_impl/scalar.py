"""
Scalar reading for yamlizer.

Handles scalar values and the scalar text of mapping keys.
"""

from typing import TYPE_CHECKING, Any

from ..convert import ConversionError, convert_scalar
from ..errors import ConversionFailure
from ..lexer import TokenKind
from ..schema import ScalarSchema
from .base import ReadResult


class ScalarReaderMixin:
    """
    Mixin providing scalar reading.

    Note: This mixin expects to be combined with BaseReader via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        error: Any

    def read_scalar(self, schema: ScalarSchema, pos: int) -> ReadResult:
        """
        Read one scalar token and convert it to ``schema.kind``.

        Raises:
            ConversionFailure: If the text is not a valid literal
        """
        token, pos = self.expect(TokenKind.SCALAR, pos, f"{schema.kind.value} scalar")
        try:
            value = convert_scalar(token.value, schema.kind)
        except ConversionError as e:
            raise self.error(ConversionFailure, str(e), token) from e
        return ReadResult(value, pos)

    def read_key_text(self, pos: int) -> ReadResult:
        """
        Read ``KEY scalar`` and return the key text.

        The VALUE token that follows is left for the caller.
        """
        _, pos = self.expect(TokenKind.KEY, pos)
        token, pos = self.expect(TokenKind.SCALAR, pos, "scalar key")
        return ReadResult(token.value, pos)
