"""
Token source for yamlizer.

Wraps PyYAML's scanner and converts its tokens into the fixed TokenKind
vocabulary the readers understand. Tokens are produced lazily and kept in an
append-only arena addressed by integer positions, so a reader can hand a
position back to the dispatcher and resume from it later.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import TracebackType

import yaml
from yaml import tokens as yaml_tokens

from .errors import UnexpectedEnd, make_read_error, make_scan_error, make_snippet

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    """Token kinds produced by the scanner."""

    # Stream
    STREAM_START = "stream-start"
    STREAM_END = "stream-end"

    # Block collections
    BLOCK_MAPPING_START = "block-mapping-start"
    BLOCK_MAPPING_END = "block-mapping-end"
    BLOCK_SEQUENCE_START = "block-sequence-start"
    BLOCK_SEQUENCE_END = "block-sequence-end"
    BLOCK_ENTRY = "block-entry"

    # Flow collections
    FLOW_SEQUENCE_START = "flow-sequence-start"
    FLOW_SEQUENCE_END = "flow-sequence-end"
    FLOW_MAPPING_START = "flow-mapping-start"
    FLOW_MAPPING_END = "flow-mapping-end"
    FLOW_ENTRY = "flow-entry"

    # Mapping entries
    KEY = "key"
    VALUE = "value"

    # Literals
    SCALAR = "scalar"

    # Scanned but never accepted by a reader
    DOCUMENT_START = "document-start"
    DOCUMENT_END = "document-end"
    DIRECTIVE = "directive"
    ALIAS = "alias"
    ANCHOR = "anchor"
    TAG = "tag"


# BlockEndToken is resolved separately, see Scanner._block_end_kind
_KIND_BY_TOKEN_CLASS: dict[type, TokenKind] = {
    yaml_tokens.StreamStartToken: TokenKind.STREAM_START,
    yaml_tokens.StreamEndToken: TokenKind.STREAM_END,
    yaml_tokens.BlockMappingStartToken: TokenKind.BLOCK_MAPPING_START,
    yaml_tokens.BlockSequenceStartToken: TokenKind.BLOCK_SEQUENCE_START,
    yaml_tokens.BlockEntryToken: TokenKind.BLOCK_ENTRY,
    yaml_tokens.FlowSequenceStartToken: TokenKind.FLOW_SEQUENCE_START,
    yaml_tokens.FlowSequenceEndToken: TokenKind.FLOW_SEQUENCE_END,
    yaml_tokens.FlowMappingStartToken: TokenKind.FLOW_MAPPING_START,
    yaml_tokens.FlowMappingEndToken: TokenKind.FLOW_MAPPING_END,
    yaml_tokens.FlowEntryToken: TokenKind.FLOW_ENTRY,
    yaml_tokens.KeyToken: TokenKind.KEY,
    yaml_tokens.ValueToken: TokenKind.VALUE,
    yaml_tokens.ScalarToken: TokenKind.SCALAR,
    yaml_tokens.DocumentStartToken: TokenKind.DOCUMENT_START,
    yaml_tokens.DocumentEndToken: TokenKind.DOCUMENT_END,
    yaml_tokens.DirectiveToken: TokenKind.DIRECTIVE,
    yaml_tokens.AliasToken: TokenKind.ALIAS,
    yaml_tokens.AnchorToken: TokenKind.ANCHOR,
    yaml_tokens.TagToken: TokenKind.TAG,
}


@dataclass(frozen=True)
class Token:
    """
    A single scanned token.

    Attributes:
        kind: Kind of token
        value: Literal text for SCALAR tokens, None otherwise
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    kind: TokenKind
    value: str | None
    line: int
    column: int

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.kind.value}, {self.line}:{self.column})"
        return f"Token({self.kind.value}, {self.value!r}, {self.line}:{self.column})"


class Scanner:
    """
    Forward-only token source over a text buffer.

    Each call to scan() returns the next token in document order.
    """

    def __init__(self, text: str, file: Path | None = None):
        """
        Initialize scanner.

        Args:
            text: Source text to scan
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self._tokens: Iterator[yaml_tokens.Token] = yaml.scan(text, Loader=yaml.SafeLoader)
        self._open_blocks: list[TokenKind] = []
        self.exhausted = False

    def scan(self) -> Token:
        """
        Scan and return the next token.

        Raises:
            ScanError: If PyYAML rejects the text
            UnexpectedEnd: If called after the stream end was produced
        """
        try:
            raw = next(self._tokens)
        except StopIteration:
            self.exhausted = True
            raise make_read_error(UnexpectedEnd, "Token stream is exhausted", None, self.file)
        except yaml.MarkedYAMLError as e:
            mark = e.problem_mark or e.context_mark
            message = e.problem or str(e)
            if mark is None:
                raise make_scan_error(message, 1, 1, self.file) from e
            raise make_scan_error(
                message,
                mark.line + 1,
                mark.column + 1,
                self.file,
                make_snippet(self.text, mark.line + 1),
            ) from e
        except yaml.YAMLError as e:
            raise make_scan_error(str(e), 1, 1, self.file) from e

        return self._convert(raw)

    def close(self) -> None:
        """Release the underlying PyYAML scanner."""
        close = getattr(self._tokens, "close", None)
        if close is not None:
            close()
        self.exhausted = True

    def _convert(self, raw: yaml_tokens.Token) -> Token:
        line = raw.start_mark.line + 1
        column = raw.start_mark.column + 1

        if isinstance(raw, yaml_tokens.BlockEndToken):
            kind = self._block_end_kind(line, column)
        else:
            kind = _KIND_BY_TOKEN_CLASS[type(raw)]
            if kind in (TokenKind.BLOCK_MAPPING_START, TokenKind.BLOCK_SEQUENCE_START):
                self._open_blocks.append(kind)

        if kind == TokenKind.STREAM_END:
            self.exhausted = True

        value = raw.value if isinstance(raw, yaml_tokens.ScalarToken) else None
        return Token(kind=kind, value=value, line=line, column=column)

    def _block_end_kind(self, line: int, column: int) -> TokenKind:
        """Resolve a generic block end into the collection it closes."""
        if not self._open_blocks:
            raise make_scan_error(
                "Block end without an open block collection", line, column, self.file
            )
        opened = self._open_blocks.pop()
        if opened == TokenKind.BLOCK_MAPPING_START:
            return TokenKind.BLOCK_MAPPING_END
        return TokenKind.BLOCK_SEQUENCE_END


class TokenStream:
    """
    Lazily filled token arena.

    Positions are plain integers. at(pos) scans forward until the token at
    ``pos`` exists; tokens already scanned are never rescanned, so rolling a
    position back is free. Use as a context manager so the scanner is
    released on every exit path.
    """

    def __init__(self, text: str, file: Path | None = None):
        self.file = file
        self.tokens: list[Token] = []
        self._scanner = Scanner(text, file)

    def __enter__(self) -> "TokenStream":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._scanner.close()
        logger.debug("Token stream closed after %d tokens", len(self.tokens))

    def at(self, pos: int) -> Token:
        """
        Return the token at ``pos``, scanning forward as needed.

        Raises:
            UnexpectedEnd: If the scanner ran out before ``pos``
        """
        while pos >= len(self.tokens):
            if self._scanner.exhausted:
                raise make_read_error(
                    UnexpectedEnd, "Unexpected end of token stream", self._last_token(), self.file
                )
            self.tokens.append(self._scanner.scan())
        return self.tokens[pos]

    def _last_token(self) -> Token | None:
        return self.tokens[-1] if self.tokens else None


def tokenize(text: str, file: Path | None = None) -> list[Token]:
    """
    Convenience function to scan a whole document.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens, ending with STREAM_END
    """
    scanner = Scanner(text, file)
    result: list[Token] = []
    try:
        while True:
            token = scanner.scan()
            result.append(token)
            if token.kind == TokenKind.STREAM_END:
                return result
    finally:
        scanner.close()
