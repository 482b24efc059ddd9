"""Tests for scalar text conversion."""

import math
from decimal import Decimal

import pytest

from yamlizer.core.convert import (
    ConversionError,
    convert_scalar,
    to_bool,
    to_decimal,
    to_float,
    to_int,
)
from yamlizer.core.schema import ScalarKind


class TestToInt:
    @pytest.mark.parametrize(
        "text,expected",
        [("123", 123), ("-7", -7), ("+5", 5), ("0", 0), ("0x1F", 31), ("0XFF", 255), ("0o17", 15)],
    )
    def test_valid(self, text, expected):
        assert to_int(text) == expected

    @pytest.mark.parametrize("text", ["", "1.5", "12a", " 1", "1_000", "0x", "abc"])
    def test_invalid(self, text):
        with pytest.raises(ConversionError):
            to_int(text)


class TestToFloat:
    @pytest.mark.parametrize(
        "text,expected",
        [("1.5", 1.5), ("-2", -2.0), (".5", 0.5), ("1e3", 1000.0), ("2.5E-1", 0.25)],
    )
    def test_valid(self, text, expected):
        assert to_float(text) == expected

    def test_infinity(self):
        assert to_float(".inf") == math.inf
        assert to_float("-inf") == -math.inf

    def test_nan(self):
        assert math.isnan(to_float(".nan"))

    @pytest.mark.parametrize("text", ["", "1.2.3", "e5", "one"])
    def test_invalid(self, text):
        with pytest.raises(ConversionError):
            to_float(text)


class TestToDecimal:
    def test_exact_value(self):
        assert to_decimal("0.1") == Decimal("0.1")

    def test_invalid(self):
        with pytest.raises(ConversionError):
            to_decimal("ten")


class TestToBool:
    @pytest.mark.parametrize("text", ["true", "True", "yes", "on", "1"])
    def test_true(self, text):
        assert to_bool(text) is True

    @pytest.mark.parametrize("text", ["false", "FALSE", "no", "off", "0"])
    def test_false(self, text):
        assert to_bool(text) is False

    def test_invalid(self):
        with pytest.raises(ConversionError):
            to_bool("maybe")


def test_convert_scalar_dispatches_on_kind():
    assert convert_scalar("42", ScalarKind.INT) == 42
    assert convert_scalar("42", ScalarKind.STR) == "42"
    assert convert_scalar("yes", ScalarKind.BOOL) is True
