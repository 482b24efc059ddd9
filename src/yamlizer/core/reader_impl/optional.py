"""
Optional reading for yamlizer.

An optional value is read by attempting its inner schema. Any read failure
inside the attempt is discarded: the value becomes None and the position is
rolled back to where the attempt started. This also hides malformed input
inside a present value; the enclosing reader usually fails on the tokens
left behind.
"""

import logging
from typing import TYPE_CHECKING, Any

from ..errors import DeserializeError, NestingTooDeep
from ..schema import OptionalSchema
from .base import ReadResult

logger = logging.getLogger(__name__)


class OptionalReaderMixin:
    """
    Mixin providing optional reading.

    Note: This mixin expects to be combined with BaseReader via multiple inheritance.
    """

    if TYPE_CHECKING:
        read: Any

    def read_optional(self, schema: OptionalSchema, pos: int, depth: int) -> ReadResult:
        """Read ``schema.inner`` at ``pos``, or None with ``pos`` unchanged."""
        try:
            return self.read(schema.inner, pos, depth)
        except NestingTooDeep:
            raise
        except DeserializeError as e:
            logger.debug("Optional value at position %d read as None: %s", pos, e.message)
            return ReadResult(None, pos)
