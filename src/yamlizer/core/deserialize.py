"""
Entry point for yamlizer.

deserialize() is the only call surrounding code needs: it owns the token
stream for the duration of the call and returns the typed value or raises
the first error found in document order.
"""

import logging
from pathlib import Path
from typing import Any

from .classifier import schema_for
from .lexer import TokenStream
from .reader_impl import read_document
from .schema import describe
from .settings import ReaderSettings

logger = logging.getLogger(__name__)


def deserialize(
    schema: Any,
    text: str,
    *,
    settings: ReaderSettings | None = None,
    file: Path | None = None,
) -> Any:
    """
    Deserialize a YAML document into a value of ``schema``.

    Args:
        schema: A schema, or a Python type to classify (``int``,
            a dataclass, ``list[str]``, ...)
        text: Document text
        settings: Reader limits (defaults when None)
        file: Source path shown in error locations

    Returns:
        The fully built value

    Raises:
        SchemaError: If ``schema`` cannot be classified
        ScanError: If the text is not valid YAML
        DeserializeError: If the document does not fit the schema

    Examples:
        >>> deserialize(int, "123")
        123
        >>> deserialize(list[str], "[foo, bar, baz]")
        ['foo', 'bar', 'baz']
    """
    root = schema_for(schema)
    logger.debug("Deserializing %s into %s", file or "<string>", describe(root))

    with TokenStream(text, file) as stream:
        value = read_document(root, stream, settings)

    logger.debug("Read %d tokens from %s", len(stream.tokens), file or "<string>")
    return value


def deserialize_file(
    schema: Any,
    path: Path | str,
    *,
    settings: ReaderSettings | None = None,
) -> Any:
    """
    Read a UTF-8 file and deserialize it into a value of ``schema``.

    Error locations include the file path.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return deserialize(schema, text, settings=settings, file=path)
