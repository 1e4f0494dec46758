"""Schema resolution errors and field path formatting."""

from __future__ import annotations

from collections.abc import Sequence

type PathSegment = str | int


def format_path(path: Sequence[PathSegment]) -> str:
    """Render a field path as dotted names with indexed array positions.

    Integer segments render as ``[i]``; string segments that follow a map
    marker render as ``["key"]``.

    Returns
    -------
    str
        Human-readable path such as ``order.items[2].price``.
    """
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif segment.startswith("[") and segment.endswith("]"):
            parts.append(segment)
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts) or "<root>"


def map_key_segment(key: str) -> str:
    """Return the path segment for a map entry.

    Returns
    -------
    str
        Bracketed, quoted key segment.
    """
    escaped = key.replace("\\", "\\\\").replace('"', '\\"')
    return f'["{escaped}"]'


class SchemaError(ValueError):
    """Raised when a schema cannot drive conversion."""

    def __init__(self, message: str, *, path: Sequence[PathSegment] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.path: tuple[PathSegment, ...] = tuple(path)

    def prepend(self, segment: PathSegment) -> None:
        """Prefix the error path with an enclosing segment."""
        self.path = (segment, *self.path)

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{format_path(self.path)}: {self.message}"


class AmbiguousUnionError(SchemaError):
    """Raised when a union does not resolve to exactly one non-null branch."""


class IncompatibleLogicalTypeError(SchemaError):
    """Raised when a logical type annotates an unsupported storage type."""


__all__ = [
    "AmbiguousUnionError",
    "IncompatibleLogicalTypeError",
    "PathSegment",
    "SchemaError",
    "format_path",
    "map_key_segment",
]
