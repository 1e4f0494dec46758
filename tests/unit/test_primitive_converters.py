"""Tests for primitive-type converters."""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

import pytest

from coercion.errors import ParseFailureError, UnsupportedSourceShapeError
from coercion.primitives import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    to_boolean,
    to_bytes,
    to_double,
    to_enum_symbol,
    to_fixed,
    to_float,
    to_int,
    to_long,
    to_null,
    to_string,
)
from schema_spec.factories import enum, fixed

_HELLO_B64 = "aGVsbG8="
_ANSWER = 42
_HUGE_DIGITS = 5000


class TestIntegers:
    """Tests for int and long conversion."""

    @pytest.mark.parametrize(
        "value",
        [42, "42", " 42 ", "+42", 42.0, Decimal(42), Decimal("42.000")],
    )
    def test_accepts_integral_forms(self, value: object) -> None:
        """Integral numbers and integer literals are accepted."""
        assert to_int(value) == _ANSWER
        assert to_long(value) == _ANSWER

    def test_int32_bounds(self) -> None:
        """The int32 range is inclusive at both ends."""
        assert to_int(INT32_MAX) == INT32_MAX
        assert to_int(INT32_MIN) == INT32_MIN
        with pytest.raises(ParseFailureError, match="out of range"):
            to_int(INT32_MAX + 1)
        with pytest.raises(ParseFailureError, match="out of range"):
            to_int(str(INT32_MIN - 1))

    def test_long_accepts_int32_overflow(self) -> None:
        """Values beyond int32 still fit a long."""
        assert to_long(INT32_MAX + 1) == INT32_MAX + 1
        with pytest.raises(ParseFailureError, match="out of range"):
            to_long(INT64_MAX + 1)

    @pytest.mark.parametrize("text", ["9" * _HUGE_DIGITS, "-" + "9" * _HUGE_DIGITS])
    def test_huge_digit_strings_are_out_of_range(self, text: str) -> None:
        """Very long integer literals fail as out of range instead of crashing."""
        with pytest.raises(ParseFailureError, match="out of range"):
            to_long(text)

    def test_huge_int_is_out_of_range(self) -> None:
        """Ints too large to print still produce a readable error."""
        with pytest.raises(ParseFailureError, match="bits") as excinfo:
            to_long(10**_HUGE_DIGITS)
        assert "out of range" in str(excinfo.value)

    def test_leading_zeros_do_not_count_toward_length(self) -> None:
        """Zero padding does not push a literal out of range."""
        assert to_long("0" * 30 + "42") == _ANSWER

    @pytest.mark.parametrize(
        "value",
        ["4.2", "4e2", "forty", "", "\u0661\u0662\u0663", "\uff14\uff12", 4.5, Decimal("4.5"), float("nan")],
    )
    def test_rejects_non_integral(self, value: object) -> None:
        """Fractions, non-numeric text and non-ASCII digits fail to parse."""
        with pytest.raises(ParseFailureError):
            to_int(value)

    @pytest.mark.parametrize("value", [True, b"42", [42], dt.date(2024, 1, 1)])
    def test_rejects_other_shapes(self, value: object) -> None:
        """Booleans are not numbers, nor are bytes or containers."""
        with pytest.raises(UnsupportedSourceShapeError):
            to_long(value)


class TestFloats:
    """Tests for float and double conversion."""

    def test_accepts_numeric_forms(self) -> None:
        """Numbers and numeric text convert to float."""
        assert to_double(1) == 1.0
        assert to_double("2.5") == 2.5
        assert to_double(Decimal("0.25")) == 0.25
        assert to_float(" -1.5 ") == -1.5

    def test_infinity_literals_are_allowed(self) -> None:
        """Explicit infinity text is not an overflow."""
        assert to_double("inf") == float("inf")
        assert to_double("-Infinity") == float("-inf")

    def test_double_overflow_is_rejected(self) -> None:
        """Finite text too large for a double fails."""
        with pytest.raises(ParseFailureError, match="out of range"):
            to_double("1e400")
        with pytest.raises(ParseFailureError, match="out of range"):
            to_double(10**400)

    def test_float32_range(self) -> None:
        """Finite values beyond float32 are rejected for float fields."""
        assert to_double(1e39) == 1e39
        with pytest.raises(ParseFailureError, match="float32"):
            to_float(1e39)

    @pytest.mark.parametrize("value", [True, "abc", "\u0661\u0662\u0663"])
    def test_rejects_non_numbers(self, value: object) -> None:
        """Booleans and junk text are not numbers."""
        with pytest.raises((ParseFailureError, UnsupportedSourceShapeError)):
            to_double(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), (False, False), ("true", True), ("FALSE", False), (" True ", True)],
)
def test_to_boolean_accepts(value: object, *, expected: bool) -> None:
    """Booleans and true/false text are accepted."""
    assert to_boolean(value) is expected


def test_to_boolean_rejects_numbers_and_other_text() -> None:
    """Numbers are not truth values."""
    with pytest.raises(UnsupportedSourceShapeError):
        to_boolean(1)
    with pytest.raises(ParseFailureError, match="'true' or 'false'"):
        to_boolean("yes")


def test_to_bytes_accepts_raw_and_base64() -> None:
    """Bytes-like values pass through and base64 text decodes."""
    assert to_bytes(b"hello") == b"hello"
    assert to_bytes(bytearray(b"hi")) == b"hi"
    assert to_bytes(memoryview(b"hi")) == b"hi"
    assert to_bytes(_HELLO_B64) == b"hello"


def test_to_bytes_rejects_invalid_base64() -> None:
    """Malformed base64 text fails to parse."""
    with pytest.raises(ParseFailureError, match="invalid base64"):
        to_bytes("not base64!")
    with pytest.raises(UnsupportedSourceShapeError):
        to_bytes(12)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("text", "text"),
        (True, "true"),
        (12, "12"),
        (1.5, "1.5"),
        (Decimal("1.50"), "1.50"),
        (dt.date(2024, 1, 2), "2024-01-02"),
        (dt.time(12, 30), "12:30:00"),
        (uuid.UUID(int=1), "00000000-0000-0000-0000-000000000001"),
    ],
)
def test_to_string_canonical_forms(value: object, expected: str) -> None:
    """Scalars render in their canonical text form."""
    assert to_string(value) == expected


@pytest.mark.parametrize("value", [b"raw", [1], {"a": 1}])
def test_to_string_rejects_containers_and_bytes(value: object) -> None:
    """Containers and raw bytes have no canonical text."""
    with pytest.raises(UnsupportedSourceShapeError):
        to_string(value)


def test_to_string_rejects_unprintable_ints() -> None:
    """Ints beyond the interpreter's printable digit limit fail to parse."""
    with pytest.raises(ParseFailureError, match="too many digits"):
        to_string(10**_HUGE_DIGITS)


def test_to_null_accepts_only_none() -> None:
    """The null type admits only None."""
    assert to_null(None) is None
    with pytest.raises(UnsupportedSourceShapeError):
        to_null(0)


def test_enum_symbol_conversion() -> None:
    """Enum values must be one of the declared symbols."""
    spec = enum("Status", ["OPEN", "CLOSED"])
    assert to_enum_symbol("OPEN", spec) == "OPEN"
    with pytest.raises(ParseFailureError, match="not one of OPEN, CLOSED"):
        to_enum_symbol("open", spec)
    with pytest.raises(UnsupportedSourceShapeError):
        to_enum_symbol(1, spec)


def test_fixed_conversion_checks_length() -> None:
    """Fixed values must have exactly the declared size."""
    spec = fixed("Pair", 2)
    assert to_fixed(b"ab", spec) == b"ab"
    assert to_fixed("YWI=", spec) == b"ab"
    with pytest.raises(ParseFailureError, match="expected 2 bytes, got 3"):
        to_fixed(b"abc", spec)
