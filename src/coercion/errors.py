"""Error taxonomy for schema-directed value coercion."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from schema_spec.errors import PathSegment, format_path

_VALUE_PREVIEW_LIMIT = 80
_LARGE_INT_BITS = 1024


class CoercionErrorKind(StrEnum):
    """Categorize coercion failures."""

    UNSUPPORTED_SOURCE_SHAPE = "unsupported_source_shape"
    PARSE_FAILURE = "parse_failure"
    RESCALE_LOSS = "rescale_loss"
    NESTED_RECORD_SHAPE_MISMATCH = "nested_record_shape_mismatch"
    MISSING_REQUIRED_FIELD = "missing_required_field"


def _preview(value: object) -> str:
    if isinstance(value, int) and value.bit_length() > _LARGE_INT_BITS:
        # repr of a huge int trips the interpreter digit limit.
        return f"<int of {value.bit_length()} bits>"
    text = repr(value)
    if len(text) > _VALUE_PREVIEW_LIMIT:
        return f"{text[: _VALUE_PREVIEW_LIMIT - 3]}..."
    return text


class CoercionError(ValueError):
    """Raised when a value cannot be coerced to its schema type.

    The error path is built up while the error propagates out of nested
    records and arrays, so ``str(exc)`` names the full field path.
    """

    kind: CoercionErrorKind = CoercionErrorKind.UNSUPPORTED_SOURCE_SHAPE

    def __init__(
        self,
        value: object,
        expected: str,
        shape: str,
        reason: str | None = None,
        *,
        path: Sequence[PathSegment] = (),
    ) -> None:
        self.value = value
        self.expected = expected
        self.shape = shape
        self.reason = reason
        self.path: tuple[PathSegment, ...] = tuple(path)
        super().__init__(self._render())

    def prepend(self, segment: PathSegment) -> None:
        """Prefix the error path with an enclosing segment."""
        self.path = (segment, *self.path)
        self.args = (self._render(),)

    @property
    def field_path(self) -> str:
        """Return the rendered field path."""
        return format_path(self.path)

    def _render(self) -> str:
        message = f"{self.field_path}: cannot coerce {self.shape} {_preview(self.value)} to {self.expected}"
        if self.reason:
            message = f"{message}: {self.reason}"
        return message

    def payload(self) -> dict[str, str]:
        """Return a JSON-ready description of the failure.

        Returns
        -------
        dict[str, str]
            Kind, path, expected type, value shape and reason.
        """
        payload = {
            "kind": str(self.kind),
            "path": self.field_path,
            "expected": self.expected,
            "shape": self.shape,
            "value": _preview(self.value),
        }
        if self.reason:
            payload["reason"] = self.reason
        return payload


class UnsupportedSourceShapeError(CoercionError):
    """Raised when a value shape has no conversion rule for the target type."""

    kind = CoercionErrorKind.UNSUPPORTED_SOURCE_SHAPE


class ParseFailureError(CoercionError):
    """Raised when text or a number cannot be parsed into the target type."""

    kind = CoercionErrorKind.PARSE_FAILURE


class RescaleLossError(CoercionError):
    """Raised when a decimal cannot be represented at the declared scale."""

    kind = CoercionErrorKind.RESCALE_LOSS


class NestedRecordShapeMismatchError(CoercionError):
    """Raised when a record-typed value is not a field mapping."""

    kind = CoercionErrorKind.NESTED_RECORD_SHAPE_MISMATCH


class MissingRequiredFieldError(CoercionError):
    """Raised when a non-nullable field has no value."""

    kind = CoercionErrorKind.MISSING_REQUIRED_FIELD

    def _render(self) -> str:
        return f"{self.field_path}: missing value for non-nullable {self.expected}"


__all__ = [
    "CoercionError",
    "CoercionErrorKind",
    "MissingRequiredFieldError",
    "NestedRecordShapeMismatchError",
    "ParseFailureError",
    "RescaleLossError",
    "UnsupportedSourceShapeError",
]
