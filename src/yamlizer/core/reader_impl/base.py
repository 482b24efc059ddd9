"""
Base reader class for yamlizer.

Provides token lookup, matching, and error generation used by all reader
mixins. Positions are plain integers into the token stream and are passed
and returned explicitly; the reader itself keeps no cursor.
"""

from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, runtime_checkable

from ..errors import (
    DeserializeError,
    UnexpectedEnd,
    UnexpectedTokenKind,
    make_read_error,
)
from ..lexer import Token, TokenKind, TokenStream
from ..settings import DEFAULT_SETTINGS, ReaderSettings

if TYPE_CHECKING:
    from ..schema import Schema


class ReadResult(NamedTuple):
    """A value read from the stream and the position just after it."""

    value: Any
    pos: int


# Human-readable names used in error messages
TOKEN_DESCRIPTIONS: dict[TokenKind, str] = {
    TokenKind.STREAM_START: "start of stream",
    TokenKind.STREAM_END: "end of stream",
    TokenKind.BLOCK_MAPPING_START: "block mapping",
    TokenKind.BLOCK_MAPPING_END: "end of block mapping",
    TokenKind.BLOCK_SEQUENCE_START: "block sequence",
    TokenKind.BLOCK_SEQUENCE_END: "end of block sequence",
    TokenKind.BLOCK_ENTRY: "'-' entry",
    TokenKind.FLOW_SEQUENCE_START: "'['",
    TokenKind.FLOW_SEQUENCE_END: "']'",
    TokenKind.FLOW_MAPPING_START: "'{'",
    TokenKind.FLOW_MAPPING_END: "'}'",
    TokenKind.FLOW_ENTRY: "','",
    TokenKind.KEY: "mapping key",
    TokenKind.VALUE: "':'",
    TokenKind.SCALAR: "scalar",
    TokenKind.DOCUMENT_START: "document start '---' (not supported)",
    TokenKind.DOCUMENT_END: "document end '...' (not supported)",
    TokenKind.DIRECTIVE: "directive (not supported)",
    TokenKind.ALIAS: "alias (not supported)",
    TokenKind.ANCHOR: "anchor (not supported)",
    TokenKind.TAG: "tag (not supported)",
}


def describe_token(token: Token) -> str:
    if token.kind == TokenKind.SCALAR:
        return f"scalar {token.value!r}"
    return TOKEN_DESCRIPTIONS[token.kind]


@runtime_checkable
class ReaderProtocol(Protocol):
    """
    Protocol defining the interface available to reader mixins.

    This allows mypy to understand that mixins will have access to
    BaseReader methods when combined in the final Reader class.
    """

    stream: TokenStream
    settings: ReaderSettings

    def token_at(self, pos: int) -> Token: ...
    def match(self, pos: int, *kinds: TokenKind) -> bool: ...
    def expect(self, kind: TokenKind, pos: int, what: str | None = None) -> ReadResult: ...
    def unexpected(self, token: Token, what: str) -> DeserializeError: ...
    def error(
        self, error_cls: type[DeserializeError], message: str, token: Token | None
    ) -> DeserializeError: ...

    # Dispatch, provided by the final Reader class
    def read(self, schema: "Schema", pos: int, depth: int = 0) -> ReadResult: ...


class BaseReader:
    """
    Base reader class with token utilities.

    This class provides the foundation for schema-directed recursive descent:
    token lookup by position, matching, and error generation.
    """

    def __init__(self, stream: TokenStream, settings: ReaderSettings | None = None):
        """
        Initialize reader.

        Args:
            stream: Token stream to read from
            settings: Reader limits (defaults when None)
        """
        self.stream = stream
        self.settings = settings or DEFAULT_SETTINGS

    def token_at(self, pos: int) -> Token:
        """Get the token at ``pos``."""
        return self.stream.at(pos)

    def match(self, pos: int, *kinds: TokenKind) -> bool:
        """Check if the token at ``pos`` is any of the given kinds."""
        return self.token_at(pos).kind in kinds

    def expect(self, kind: TokenKind, pos: int, what: str | None = None) -> ReadResult:
        """
        Expect a token of ``kind`` at ``pos``.

        Returns:
            ReadResult of the token and the position after it

        Raises:
            UnexpectedEnd: If the stream ends first
            UnexpectedTokenKind: If the token is of another kind
        """
        token = self.token_at(pos)
        if token.kind != kind:
            raise self.unexpected(token, what or TOKEN_DESCRIPTIONS[kind])
        return ReadResult(token, pos + 1)

    def unexpected(self, token: Token, what: str) -> DeserializeError:
        """Build the error for finding ``token`` where ``what`` was required."""
        if token.kind == TokenKind.STREAM_END:
            return self.error(UnexpectedEnd, f"Expected {what}, got end of stream", token)
        return self.error(
            UnexpectedTokenKind, f"Expected {what}, got {describe_token(token)}", token
        )

    def error(
        self, error_cls: type[DeserializeError], message: str, token: Token | None
    ) -> DeserializeError:
        """Build an error located at ``token``."""
        return make_read_error(error_cls, message, token, self.stream.file)

    def flow_item_start(
        self, pos: int, end_kind: TokenKind, first: bool, what: str
    ) -> tuple[bool, int]:
        """
        Step over the separator in front of the next flow collection item.

        Accepts a single trailing ',' before the closing bracket.

        Returns:
            (True, position after the closing token) at the end of the
            collection, otherwise (False, position of the item)
        """
        if self.match(pos, end_kind):
            return True, pos + 1
        if not first:
            _, pos = self.expect(TokenKind.FLOW_ENTRY, pos, f"',' or end of {what}")
            if self.match(pos, end_kind):
                return True, pos + 1
        return False, pos
