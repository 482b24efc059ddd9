"""
Scalar conversion for yamlizer.

Converts scalar token text into primitive values. Parsing is purely textual
and locale-independent: only the literal forms listed here are accepted, so
``int("1_000")`` style leniency and surrounding whitespace are rejected.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from .schema import ScalarKind

_INT_RE = re.compile(r"[-+]?(?:0[xX][0-9a-fA-F]+|0o[0-7]+|[0-9]+)")
_FLOAT_RE = re.compile(r"[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")
_INF_RE = re.compile(r"[-+]?\.?inf(?:inity)?", re.IGNORECASE)
_NAN_RE = re.compile(r"\.?nan", re.IGNORECASE)

_TRUE_LITERALS = frozenset({"true", "yes", "on", "1"})
_FALSE_LITERALS = frozenset({"false", "no", "off", "0"})


class ConversionError(ValueError):
    """Text is not a valid literal of the requested kind."""

    pass


def to_int(text: str) -> int:
    """Parse a decimal, ``0x`` hex or ``0o`` octal integer literal."""
    if not _INT_RE.fullmatch(text):
        raise ConversionError(f"'{text}' is not an integer")
    sign = -1 if text.startswith("-") else 1
    digits = text.lstrip("+-")
    if digits[:2] in ("0x", "0X"):
        return sign * int(digits[2:], 16)
    if digits[:2] == "0o":
        return sign * int(digits[2:], 8)
    return sign * int(digits, 10)


def _special_float(text: str) -> float | None:
    if _INF_RE.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    if _NAN_RE.fullmatch(text):
        return math.nan
    return None


def to_float(text: str) -> float:
    """Parse a decimal or exponent float literal, or inf/nan."""
    special = _special_float(text)
    if special is not None:
        return special
    if not _FLOAT_RE.fullmatch(text):
        raise ConversionError(f"'{text}' is not a floating point number")
    return float(text)


def to_decimal(text: str) -> Decimal:
    """Parse the float literal set as an exact Decimal."""
    special = _special_float(text)
    if special is not None:
        return Decimal(special)
    if not _FLOAT_RE.fullmatch(text):
        raise ConversionError(f"'{text}' is not a decimal number")
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ConversionError(f"'{text}' is not a decimal number") from e


def to_bool(text: str) -> bool:
    """Parse true/false, yes/no, on/off or 1/0 (case-insensitive)."""
    lowered = text.lower()
    if lowered in _TRUE_LITERALS:
        return True
    if lowered in _FALSE_LITERALS:
        return False
    raise ConversionError(f"'{text}' is not a boolean")


_CONVERTERS = {
    ScalarKind.INT: to_int,
    ScalarKind.FLOAT: to_float,
    ScalarKind.DECIMAL: to_decimal,
    ScalarKind.BOOL: to_bool,
    ScalarKind.STR: str,
}


def convert_scalar(text: str, kind: ScalarKind) -> Any:
    """
    Convert scalar text to the primitive type named by ``kind``.

    Raises:
        ConversionError: If the text is not a valid literal of that type
    """
    return _CONVERTERS[kind](text)
