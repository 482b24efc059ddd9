"""
Error types for yamlizer scanning, schema construction, and deserialization.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .lexer import Token


class YamlizerError(Exception):
    """Base exception for all yamlizer errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class SchemaError(YamlizerError):
    """
    Raised when a schema is malformed or a Python type cannot be classified.

    Examples:
    - Record with two fields of the same name
    - Annotation such as ``set[int]`` with no matching shape
    """

    pass


class ScanError(YamlizerError):
    """Raised when the scanner rejects the input text."""

    pass


class DeserializeError(YamlizerError):
    """
    Raised when the token stream does not fit the target schema.

    Every read failure derives from this class. It is also the only error
    the Optional fallback recovers from.
    """

    pass


class UnexpectedTokenKind(DeserializeError):
    """Token at the current position is not one the active reader accepts."""

    pass


class KeyMismatch(DeserializeError):
    """A record field's declared name does not match the document key."""

    pass


class ArityMismatch(DeserializeError):
    """A fixed sequence has fewer or more elements than its schema."""

    pass


class DuplicateKey(DeserializeError):
    """A mapping insertion collides with an existing key."""

    pass


class ConversionFailure(DeserializeError):
    """Scalar text cannot be parsed as the requested primitive type."""

    pass


class UnexpectedEnd(DeserializeError):
    """Token stream exhausted while a token was still required."""

    pass


class NestingTooDeep(DeserializeError):
    """Document nests collections deeper than the configured limit."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source document, if it came from a file
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source text around the error location
    """

    file: Path | None
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "config.yml:10:5"
        """
        location = f"{self.file or '<string>'}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format snippet with line numbers and an error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def make_snippet(text: str, line: int, radius: int = 2) -> str:
    """Return the lines of ``text`` surrounding ``line`` (1-indexed)."""
    lines = text.split("\n")
    start = max(0, line - 1 - radius)
    end = min(len(lines), line + radius)
    return "\n".join(lines[start:end])


def make_read_error(
    error_cls: type[DeserializeError],
    message: str,
    token: "Token | None",
    file: Path | None = None,
) -> DeserializeError:
    """
    Helper to create a DeserializeError subclass located at a token.

    Args:
        error_cls: Concrete error class (KeyMismatch, ArityMismatch, ...)
        message: Error description
        token: Token the error refers to, or None when the stream ran out
        file: Optional source file path

    Returns:
        Error instance with context attached when a token is known
    """
    if token is None:
        return error_cls(message)
    context = ErrorContext(file=file, line=token.line, column=token.column)
    return error_cls(message, context)


def make_scan_error(
    message: str,
    line: int,
    column: int,
    file: Path | None = None,
    snippet: str | None = None,
) -> ScanError:
    """
    Helper to create a ScanError with context.

    Args:
        message: Error description from the scanner
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        file: Optional source file path
        snippet: Optional source snippet

    Returns:
        ScanError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ScanError(message, context)


def make_schema_error(message: str) -> SchemaError:
    """Helper to create a SchemaError (schemas carry no source location)."""
    return SchemaError(message)
