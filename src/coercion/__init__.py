"""Schema-directed coercion of loosely-typed values into typed records."""

from coercion.config import (
    CoercionPolicy,
    DecimalRoundingPolicy,
    MissingFieldPolicy,
    TimestampMicrosPolicy,
    policy_from_env,
)
from coercion.engine import ValueCoercer, convert
from coercion.errors import (
    CoercionError,
    CoercionErrorKind,
    MissingRequiredFieldError,
    NestedRecordShapeMismatchError,
    ParseFailureError,
    RescaleLossError,
    UnsupportedSourceShapeError,
)
from coercion.records import Record, RecordBuilder
from coercion.shapes import ValueShape, shape_of

__all__ = [
    "CoercionError",
    "CoercionErrorKind",
    "CoercionPolicy",
    "DecimalRoundingPolicy",
    "MissingFieldPolicy",
    "MissingRequiredFieldError",
    "NestedRecordShapeMismatchError",
    "ParseFailureError",
    "Record",
    "RecordBuilder",
    "RescaleLossError",
    "TimestampMicrosPolicy",
    "UnsupportedSourceShapeError",
    "ValueCoercer",
    "ValueShape",
    "convert",
    "policy_from_env",
    "shape_of",
]
