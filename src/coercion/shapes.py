"""Closed classification of runtime input values."""

from __future__ import annotations

import datetime as dt
import numbers
import uuid
from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import StrEnum


class ValueShape(StrEnum):
    """Runtime shape of an input value.

    Every converter decides acceptance on the shape alone, so each
    "unsupported shape" failure is one of these members.
    """

    NULL = "null"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    BYTES = "bytes"
    DATE = "date"
    TIME = "time"
    INSTANT = "instant"
    LOCAL_DATETIME = "local-datetime"
    DECIMAL = "decimal"
    UUID = "uuid"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    OTHER = "other"


_BYTES_TYPES = (bytes, bytearray, memoryview)


def shape_of(value: object) -> ValueShape:
    """Return the shape of a runtime value.

    ``bool`` is checked before ``int`` and ``datetime`` before ``date`` since
    each is a subclass of the latter. A datetime with a UTC offset is an
    instant; one without is a local date-time.

    Returns
    -------
    ValueShape
        Classified shape.
    """
    if value is None:
        return ValueShape.NULL
    if isinstance(value, bool):
        return ValueShape.BOOLEAN
    if isinstance(value, int):
        return ValueShape.INTEGER
    if isinstance(value, float):
        return ValueShape.FLOAT
    if isinstance(value, Decimal):
        return ValueShape.DECIMAL
    if isinstance(value, str):
        return ValueShape.STRING
    if isinstance(value, _BYTES_TYPES):
        return ValueShape.BYTES
    if isinstance(value, dt.datetime):
        if value.utcoffset() is None:
            return ValueShape.LOCAL_DATETIME
        return ValueShape.INSTANT
    if isinstance(value, dt.date):
        return ValueShape.DATE
    if isinstance(value, dt.time):
        return ValueShape.TIME
    if isinstance(value, uuid.UUID):
        return ValueShape.UUID
    if isinstance(value, Mapping):
        return ValueShape.MAPPING
    if isinstance(value, Sequence):
        return ValueShape.SEQUENCE
    # numpy and other numeric tower registrations
    if isinstance(value, numbers.Integral):
        return ValueShape.INTEGER
    if isinstance(value, numbers.Real):
        return ValueShape.FLOAT
    return ValueShape.OTHER


def describe_shape(value: object) -> str:
    """Return a shape label including the concrete Python type.

    Returns
    -------
    str
        Label such as ``integer (int)``.
    """
    return f"{shape_of(value)} ({type(value).__name__})"


__all__ = ["ValueShape", "describe_shape", "shape_of"]
