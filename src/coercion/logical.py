"""Logical-type converters.

Each converter produces the storage representation of its logical type:
day counts, time-of-day and epoch units as integers, decimals as the
big-endian two's-complement bytes of their unscaled value, and UUIDs as
canonical strings.
"""

from __future__ import annotations

import datetime as dt
import functools
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final, cast

from coercion.config import CoercionPolicy, DecimalRoundingPolicy, TimestampMicrosPolicy
from coercion.errors import RescaleLossError
from coercion.primitives import parse_failure, unsupported
from coercion.shapes import ValueShape, describe_shape, shape_of
from schema_spec.types import FixedTypeSpec, LogicalTypeName, LogicalTypeSpec, PrimitiveTypeSpec
from schema_spec.walker import decimal_params

EPOCH_DATE: Final = dt.date(1970, 1, 1)
EPOCH_UTC: Final = dt.datetime(1970, 1, 1, tzinfo=dt.UTC)
EPOCH_LOCAL: Final = dt.datetime(1970, 1, 1)

MICROS_PER_MILLI: Final = 1_000
MICROS_PER_SECOND: Final = 1_000_000
SECONDS_PER_DAY: Final = 86_400
# Digit ceiling for decimals whose schema declares no precision.
MAX_UNSCALED_DIGITS: Final = 10_000

_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_ISO_DATETIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}[T ][0-9]{2}:[0-9]{2}.*")


@dataclass(frozen=True)
class LogicalTarget:
    """Resolved conversion target for a logical-typed value."""

    concrete: PrimitiveTypeSpec | FixedTypeSpec
    logical: LogicalTypeSpec
    policy: CoercionPolicy

    @property
    def label(self) -> str:
        """Return the logical type label used in errors."""
        return self.logical.name


type LogicalConverter = Callable[[object, LogicalTarget], object]


def _delta_micros(delta: dt.timedelta) -> int:
    return (delta.days * SECONDS_PER_DAY + delta.seconds) * MICROS_PER_SECOND + delta.microseconds


def _time_of_day_micros(value: dt.time) -> int:
    seconds = value.hour * 3600 + value.minute * 60 + value.second
    return seconds * MICROS_PER_SECOND + value.microsecond


# -----------------------------------------------------------------------------
# Source parsing
# -----------------------------------------------------------------------------


def _as_date(value: object, label: str) -> dt.date:
    shape = shape_of(value)
    if shape is ValueShape.DATE:
        return cast("dt.date", value)
    if shape is ValueShape.STRING:
        text = str(value)
        if not _ISO_DATE_RE.fullmatch(text):
            raise parse_failure(value, label, "expected an ISO-8601 date (YYYY-MM-DD)")
        try:
            return dt.date.fromisoformat(text)
        except ValueError as exc:
            raise parse_failure(value, label, str(exc)) from exc
    raise unsupported(value, label)


def _as_time(value: object, label: str) -> dt.time:
    shape = shape_of(value)
    if shape is ValueShape.TIME:
        return cast("dt.time", value)
    if shape is ValueShape.STRING:
        try:
            return dt.time.fromisoformat(str(value).strip())
        except ValueError as exc:
            raise parse_failure(value, label, "expected an ISO-8601 time of day") from exc
    raise unsupported(value, label)


def _parse_datetime(value: object, label: str) -> dt.datetime:
    text = str(value).strip()
    if not _ISO_DATETIME_RE.fullmatch(text):
        raise parse_failure(value, label, "expected an ISO-8601 date-time")
    try:
        return dt.datetime.fromisoformat(text)
    except ValueError as exc:
        raise parse_failure(value, label, str(exc)) from exc


def _as_instant(value: object, label: str) -> dt.datetime:
    shape = shape_of(value)
    if shape is ValueShape.INSTANT:
        return cast("dt.datetime", value)
    if shape is ValueShape.STRING:
        parsed = _parse_datetime(value, label)
        if parsed.utcoffset() is None:
            raise parse_failure(value, label, "missing UTC offset")
        return parsed
    reason = "a local date-time has no offset to anchor it" if shape is ValueShape.LOCAL_DATETIME else None
    raise unsupported(value, label, reason)


def _as_local_datetime(value: object, label: str) -> dt.datetime:
    shape = shape_of(value)
    if shape is ValueShape.LOCAL_DATETIME:
        return cast("dt.datetime", value)
    if shape is ValueShape.STRING:
        parsed = _parse_datetime(value, label)
        if parsed.utcoffset() is not None:
            raise parse_failure(value, label, "unexpected UTC offset")
        return parsed
    reason = "expected a date-time without offset" if shape is ValueShape.INSTANT else None
    raise unsupported(value, label, reason)


# -----------------------------------------------------------------------------
# Date and time converters
# -----------------------------------------------------------------------------


def to_epoch_days(value: object, target: LogicalTarget) -> int:
    """Convert a calendar date to days since 1970-01-01.

    Returns
    -------
    int
        Signed day count (int32 range for every representable date).
    """
    return (_as_date(value, target.label) - EPOCH_DATE).days


def to_time_millis(value: object, target: LogicalTarget) -> int:
    """Convert a time of day to milliseconds since midnight, truncating micros.

    Returns
    -------
    int
        Milliseconds since midnight.
    """
    return _time_of_day_micros(_as_time(value, target.label)) // MICROS_PER_MILLI


def to_time_micros(value: object, target: LogicalTarget) -> int:
    """Convert a time of day to microseconds since midnight.

    Returns
    -------
    int
        Microseconds since midnight.
    """
    return _time_of_day_micros(_as_time(value, target.label))


def to_timestamp_millis(value: object, target: LogicalTarget) -> int:
    """Convert an instant to epoch milliseconds.

    Returns
    -------
    int
        Milliseconds since the epoch, floored.
    """
    return _delta_micros(_as_instant(value, target.label) - EPOCH_UTC) // MICROS_PER_MILLI


def to_timestamp_micros(value: object, target: LogicalTarget) -> int:
    """Convert an instant to epoch microseconds.

    Under ``TimestampMicrosPolicy.EXACT`` the result is whole seconds times
    one million plus the sub-second microseconds. ``MILLIS_SCALED`` drops the
    sub-millisecond part first.

    Returns
    -------
    int
        Microseconds since the epoch.
    """
    micros = _delta_micros(_as_instant(value, target.label) - EPOCH_UTC)
    if target.policy.timestamp_micros is TimestampMicrosPolicy.MILLIS_SCALED:
        return (micros // MICROS_PER_MILLI) * MICROS_PER_MILLI
    return micros


def to_local_timestamp_millis(value: object, target: LogicalTarget) -> int:
    """Convert a local date-time to epoch milliseconds, anchored at UTC.

    Returns
    -------
    int
        Milliseconds since the epoch.
    """
    return _delta_micros(_as_local_datetime(value, target.label) - EPOCH_LOCAL) // MICROS_PER_MILLI


def to_local_timestamp_micros(value: object, target: LogicalTarget) -> int:
    """Convert a local date-time to epoch microseconds, anchored at UTC.

    Returns
    -------
    int
        Microseconds since the epoch.
    """
    return _delta_micros(_as_local_datetime(value, target.label) - EPOCH_LOCAL)


# -----------------------------------------------------------------------------
# Decimals
# -----------------------------------------------------------------------------


def _as_decimal(value: object, label: str) -> Decimal:
    shape = shape_of(value)
    if shape is ValueShape.DECIMAL:
        number = cast("Decimal", value)
    elif shape is ValueShape.INTEGER:
        number = Decimal(int(cast("int", value)))
    elif shape is ValueShape.STRING:
        text = str(value).strip()
        if not text.isascii():
            raise parse_failure(value, label, "not a decimal literal")
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise parse_failure(value, label, "not a decimal literal") from exc
    elif shape is ValueShape.FLOAT:
        raise unsupported(value, label, "binary floats are not exact decimals; pass a Decimal or string")
    else:
        raise unsupported(value, label)
    if not number.is_finite():
        raise parse_failure(value, label, "decimal must be finite")
    return number


def unscaled_value(
    number: Decimal,
    scale: int,
    *,
    rounding: DecimalRoundingPolicy = DecimalRoundingPolicy.REJECT,
    max_digits: int | None = None,
) -> int:
    """Return the unscaled integer of a decimal rescaled to ``scale`` digits.

    Integer arithmetic is used throughout, so the result does not depend on
    the active decimal context precision. ``max_digits`` is checked against
    the decimal's exponent before any large integer is built.

    Returns
    -------
    int
        ``number * 10**scale`` as an integer.

    Raises
    ------
    ValueError
        Raised when rescaling under ``REJECT`` would drop non-zero digits, or
        when the result needs more than ``max_digits`` digits.
    """
    if number.is_zero():
        return 0
    sign, digits, exponent = number.as_tuple()
    needed = number.adjusted() + 1 + scale
    if max_digits is not None and needed > max_digits:
        msg = f"{needed} digits exceed precision {max_digits}"
        raise ValueError(msg)
    coefficient = functools.reduce(lambda acc, digit: acc * 10 + digit, digits, 0)
    shift = cast("int", exponent) + scale
    if shift >= 0:
        unscaled = coefficient * 10**shift
    else:
        # Dropping more places than the coefficient has digits always rounds to zero.
        divisor = 10 ** min(-shift, len(digits) + 1)
        unscaled, remainder = divmod(coefficient, divisor)
        if remainder:
            if rounding is DecimalRoundingPolicy.REJECT:
                msg = f"{number} has more than {scale} fractional digits"
                raise ValueError(msg)
            twice = remainder * 2
            if twice > divisor or (twice == divisor and unscaled % 2 == 1):
                unscaled += 1
    if needed == max_digits and unscaled >= 10**max_digits:
        # Rounding carried into a new digit.
        msg = f"{max_digits + 1} digits exceed precision {max_digits}"
        raise ValueError(msg)
    return -unscaled if sign else unscaled


def unscaled_bytes(unscaled: int, size: int | None = None) -> bytes:
    """Encode an unscaled integer as big-endian two's-complement bytes.

    Without ``size`` the minimal length is used (one byte for zero). With
    ``size`` the value is sign-extended to exactly that many bytes.

    Returns
    -------
    bytes
        Encoded integer.

    Raises
    ------
    ValueError
        Raised when the value needs more than ``size`` bytes.
    """
    magnitude = unscaled if unscaled >= 0 else ~unscaled
    length = magnitude.bit_length() // 8 + 1
    if size is None:
        return unscaled.to_bytes(length, "big", signed=True)
    if length > size:
        msg = f"unscaled value needs {length} bytes, fixed size is {size}"
        raise ValueError(msg)
    return unscaled.to_bytes(size, "big", signed=True)


def to_decimal_bytes(value: object, target: LogicalTarget) -> bytes:
    """Convert a decimal value to the bytes of its unscaled integer.

    Precision and scale come from the schema per the policy's
    ``decimal_scale_source``; rounding follows ``decimal_rounding``.

    Returns
    -------
    bytes
        Two's-complement bytes of the rescaled unscaled value.

    Raises
    ------
    RescaleLossError
        Raised when the value cannot be represented at the declared scale,
        precision or fixed size.
    """
    number = _as_decimal(value, target.label)
    precision, scale = decimal_params(
        target.concrete,
        target.logical,
        source=target.policy.decimal_scale_source,
    )
    expected = f"decimal({precision},{scale})"
    try:
        unscaled = unscaled_value(
            number,
            scale,
            rounding=target.policy.decimal_rounding,
            max_digits=MAX_UNSCALED_DIGITS if precision is None else precision,
        )
    except ValueError as exc:
        raise RescaleLossError(value, expected, describe_shape(value), str(exc)) from exc
    size = target.concrete.size if isinstance(target.concrete, FixedTypeSpec) else None
    try:
        return unscaled_bytes(unscaled, size)
    except ValueError as exc:
        raise RescaleLossError(value, expected, describe_shape(value), str(exc)) from exc


# -----------------------------------------------------------------------------
# UUIDs
# -----------------------------------------------------------------------------


def to_uuid_string(value: object, target: LogicalTarget) -> str:
    """Convert a UUID or UUID text to its canonical string form.

    Returns
    -------
    str
        Lower-case hyphenated UUID.
    """
    shape = shape_of(value)
    if shape is ValueShape.UUID:
        return str(value)
    if shape is ValueShape.STRING:
        try:
            return str(uuid.UUID(str(value).strip()))
        except ValueError as exc:
            raise parse_failure(value, target.label, "not a UUID") from exc
    raise unsupported(value, target.label)


LOGICAL_CONVERTERS: Final[dict[LogicalTypeName, LogicalConverter]] = {
    "date": to_epoch_days,
    "time-millis": to_time_millis,
    "time-micros": to_time_micros,
    "timestamp-millis": to_timestamp_millis,
    "timestamp-micros": to_timestamp_micros,
    "local-timestamp-millis": to_local_timestamp_millis,
    "local-timestamp-micros": to_local_timestamp_micros,
    "decimal": to_decimal_bytes,
    "uuid": to_uuid_string,
}


__all__ = [
    "EPOCH_DATE",
    "EPOCH_LOCAL",
    "EPOCH_UTC",
    "LOGICAL_CONVERTERS",
    "MAX_UNSCALED_DIGITS",
    "LogicalConverter",
    "LogicalTarget",
    "to_decimal_bytes",
    "to_epoch_days",
    "to_local_timestamp_micros",
    "to_local_timestamp_millis",
    "to_time_micros",
    "to_time_millis",
    "to_timestamp_micros",
    "to_timestamp_millis",
    "to_uuid_string",
    "unscaled_bytes",
    "unscaled_value",
]
