"""Primitive-type converters.

Each converter accepts its native shape or a parseable string form and
returns the Python value matching the storage type: ``int`` for int32/int64,
``float`` for float32/float64, ``bytes`` for bytes and fixed, ``str`` for
strings and enum symbols.
"""

from __future__ import annotations

import base64
import binascii
import datetime as dt
import math
import re
from collections.abc import Callable
from decimal import Decimal
from typing import Final, cast

from coercion.errors import ParseFailureError, UnsupportedSourceShapeError
from coercion.shapes import ValueShape, describe_shape, shape_of
from schema_spec.types import EnumTypeSpec, FixedTypeSpec, PrimitiveName

INT32_MIN: Final = -(2**31)
INT32_MAX: Final = 2**31 - 1
INT64_MIN: Final = -(2**63)
INT64_MAX: Final = 2**63 - 1
FLOAT32_MAX: Final = 3.4028234663852886e38

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
# int64 bounds have 19 digits.
_MAX_INTEGER_DIGITS = 19
_TRUE_TEXT = "true"
_FALSE_TEXT = "false"
_INFINITY_TEXT = frozenset({"inf", "infinity"})

type PrimitiveConverter = Callable[[object], object]


def unsupported(value: object, expected: str, reason: str | None = None) -> UnsupportedSourceShapeError:
    """Return an unsupported-shape error for a value.

    Returns
    -------
    UnsupportedSourceShapeError
        Error describing the value's shape.
    """
    return UnsupportedSourceShapeError(value, expected, describe_shape(value), reason)


def parse_failure(value: object, expected: str, reason: str) -> ParseFailureError:
    """Return a parse-failure error for a value.

    Returns
    -------
    ParseFailureError
        Error describing the value and the parse problem.
    """
    return ParseFailureError(value, expected, describe_shape(value), reason)


def _integral(value: object, expected: str) -> int:
    shape = shape_of(value)
    if shape is ValueShape.INTEGER:
        return int(cast("int", value))
    if shape is ValueShape.STRING:
        text = str(value).strip()
        if not _INTEGER_RE.fullmatch(text):
            raise parse_failure(value, expected, "not an integer literal")
        if len(text.lstrip("+-").lstrip("0")) > _MAX_INTEGER_DIGITS:
            raise parse_failure(value, expected, "out of range")
        return int(text)
    if shape is ValueShape.FLOAT:
        number = float(cast("float", value))
        if not math.isfinite(number) or not number.is_integer():
            raise parse_failure(value, expected, "not an integral number")
        return int(number)
    if shape is ValueShape.DECIMAL:
        decimal_value = cast("Decimal", value)
        if not decimal_value.is_finite() or decimal_value != decimal_value.to_integral_value():
            raise parse_failure(value, expected, "not an integral number")
        return int(decimal_value)
    raise unsupported(value, expected)


def _bounded(number: int, value: object, expected: str, low: int, high: int) -> int:
    if number < low or number > high:
        raise parse_failure(value, expected, f"out of range [{low}, {high}]")
    return number


def to_int(value: object) -> int:
    """Convert a value to a 32-bit integer.

    Returns
    -------
    int
        Integer within the int32 range.
    """
    return _bounded(_integral(value, "int"), value, "int", INT32_MIN, INT32_MAX)


def to_long(value: object) -> int:
    """Convert a value to a 64-bit integer.

    Returns
    -------
    int
        Integer within the int64 range.
    """
    return _bounded(_integral(value, "long"), value, "long", INT64_MIN, INT64_MAX)


def _real(value: object, expected: str) -> float:
    shape = shape_of(value)
    if shape in {ValueShape.INTEGER, ValueShape.FLOAT, ValueShape.DECIMAL}:
        try:
            number = float(cast("float", value))
        except OverflowError as exc:
            raise parse_failure(value, expected, "out of range") from exc
        if math.isinf(number) and isinstance(value, Decimal) and value.is_finite():
            raise parse_failure(value, expected, "out of range")
        return number
    if shape is ValueShape.STRING:
        text = str(value).strip()
        if not text.isascii():
            raise parse_failure(value, expected, "not a number")
        try:
            number = float(text)
        except ValueError as exc:
            raise parse_failure(value, expected, "not a number") from exc
        if math.isinf(number) and text.lower().lstrip("+-") not in _INFINITY_TEXT:
            raise parse_failure(value, expected, "out of range")
        return number
    raise unsupported(value, expected)


def to_float(value: object) -> float:
    """Convert a value to a 32-bit float.

    Finite values beyond the float32 range are rejected rather than becoming
    infinities.

    Returns
    -------
    float
        Number representable as float32.
    """
    number = _real(value, "float")
    if math.isfinite(number) and abs(number) > FLOAT32_MAX:
        raise parse_failure(value, "float", "out of float32 range")
    return number


def to_double(value: object) -> float:
    """Convert a value to a 64-bit float.

    Returns
    -------
    float
        Converted number.
    """
    return _real(value, "double")


def to_boolean(value: object) -> bool:
    """Convert a value to a boolean.

    Only ``bool`` values and the strings ``true``/``false`` (any case) are
    accepted; numbers are not reinterpreted as truth values.

    Returns
    -------
    bool
        Converted boolean.
    """
    shape = shape_of(value)
    if shape is ValueShape.BOOLEAN:
        return bool(value)
    if shape is ValueShape.STRING:
        text = str(value).strip().lower()
        if text == _TRUE_TEXT:
            return True
        if text == _FALSE_TEXT:
            return False
        raise parse_failure(value, "boolean", "expected 'true' or 'false'")
    raise unsupported(value, "boolean")


def _decode_base64(value: str, expected: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise parse_failure(value, expected, "invalid base64") from exc


def to_bytes(value: object) -> bytes:
    """Convert raw bytes or a base64 string to bytes.

    Returns
    -------
    bytes
        Byte sequence.
    """
    shape = shape_of(value)
    if shape is ValueShape.BYTES:
        return bytes(cast("bytes", value))
    if shape is ValueShape.STRING:
        return _decode_base64(str(value), "bytes")
    raise unsupported(value, "bytes")


def to_string(value: object) -> str:
    """Convert a scalar to its canonical string form.

    Booleans render as ``true``/``false`` and temporal values as ISO-8601.
    Containers and raw bytes have no canonical text form.

    Returns
    -------
    str
        Canonical string.
    """
    shape = shape_of(value)
    if shape is ValueShape.STRING:
        return str(value)
    if shape is ValueShape.BOOLEAN:
        return _TRUE_TEXT if value else _FALSE_TEXT
    if shape in {ValueShape.INTEGER, ValueShape.FLOAT, ValueShape.DECIMAL, ValueShape.UUID}:
        try:
            return str(value)
        except ValueError as exc:
            raise parse_failure(value, "string", "too many digits") from exc
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    raise unsupported(value, "string")


def to_null(value: object) -> None:
    """Accept only ``None`` for the null type.

    Raises
    ------
    UnsupportedSourceShapeError
        Raised for any non-null value.
    """
    if value is not None:
        raise unsupported(value, "null")


def to_enum_symbol(value: object, spec: EnumTypeSpec) -> str:
    """Convert a value to one of an enum's symbols.

    Returns
    -------
    str
        Matching symbol.
    """
    expected = f"enum {spec.name}"
    if shape_of(value) is not ValueShape.STRING:
        raise unsupported(value, expected)
    text = str(value)
    if text not in spec.symbols:
        raise parse_failure(value, expected, f"not one of {', '.join(spec.symbols)}")
    return text


def to_fixed(value: object, spec: FixedTypeSpec) -> bytes:
    """Convert raw bytes or a base64 string to a fixed-size byte sequence.

    Returns
    -------
    bytes
        Exactly ``spec.size`` bytes.
    """
    expected = f"fixed {spec.name}[{spec.size}]"
    shape = shape_of(value)
    if shape is ValueShape.BYTES:
        data = bytes(cast("bytes", value))
    elif shape is ValueShape.STRING:
        data = _decode_base64(str(value), expected)
    else:
        raise unsupported(value, expected)
    if len(data) != spec.size:
        raise parse_failure(value, expected, f"expected {spec.size} bytes, got {len(data)}")
    return data


PRIMITIVE_CONVERTERS: Final[dict[PrimitiveName, PrimitiveConverter]] = {
    "null": to_null,
    "boolean": to_boolean,
    "int": to_int,
    "long": to_long,
    "float": to_float,
    "double": to_double,
    "bytes": to_bytes,
    "string": to_string,
}


__all__ = [
    "FLOAT32_MAX",
    "INT32_MAX",
    "INT32_MIN",
    "INT64_MAX",
    "INT64_MIN",
    "PRIMITIVE_CONVERTERS",
    "PrimitiveConverter",
    "parse_failure",
    "to_boolean",
    "to_bytes",
    "to_double",
    "to_enum_symbol",
    "to_fixed",
    "to_float",
    "to_int",
    "to_long",
    "to_null",
    "to_string",
    "unsupported",
]
