"""Serializable record schema type specifications."""

from __future__ import annotations

from typing import Literal

import msgspec

from schema_spec.errors import SchemaError
from serde_msgspec import StructBaseStrict, dumps_json, loads_json, validation_error_payload

PrimitiveName = Literal[
    "null",
    "boolean",
    "int",
    "long",
    "float",
    "double",
    "bytes",
    "string",
]

LogicalTypeName = Literal[
    "date",
    "time-millis",
    "time-micros",
    "timestamp-millis",
    "timestamp-micros",
    "local-timestamp-millis",
    "local-timestamp-micros",
    "decimal",
    "uuid",
]

type PropValue = str | int | bool


class LogicalTypeSpec(StructBaseStrict, frozen=True):
    """Logical type annotation attached to a storage type.

    ``precision`` and ``scale`` are only meaningful for ``decimal``.
    """

    name: LogicalTypeName
    precision: int | None = None
    scale: int | None = None

    def __post_init__(self) -> None:
        """Validate decimal metadata bounds."""
        if self.precision is not None and self.precision <= 0:
            msg = f"Decimal precision must be positive, got {self.precision}."
            raise ValueError(msg)
        if self.scale is not None and self.scale < 0:
            msg = f"Decimal scale must be non-negative, got {self.scale}."
            raise ValueError(msg)
        if self.precision is not None and self.scale is not None and self.scale > self.precision:
            msg = f"Decimal scale {self.scale} exceeds precision {self.precision}."
            raise ValueError(msg)


class TypeSpecBase(StructBaseStrict, frozen=True, tag=True, tag_field="type"):
    """Base tagged schema type specification."""


class PrimitiveTypeSpec(TypeSpecBase, tag="primitive", frozen=True):
    """Primitive storage type, optionally annotated with a logical type."""

    name: PrimitiveName
    logical: LogicalTypeSpec | None = None
    props: dict[str, PropValue] = msgspec.field(default_factory=dict)


class FixedTypeSpec(TypeSpecBase, tag="fixed", frozen=True):
    """Fixed-size byte sequence type."""

    name: str
    size: int
    logical: LogicalTypeSpec | None = None
    props: dict[str, PropValue] = msgspec.field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the fixed size."""
        if self.size <= 0:
            msg = f"Fixed {self.name!r} size must be positive, got {self.size}."
            raise ValueError(msg)


class EnumTypeSpec(TypeSpecBase, tag="enum", frozen=True):
    """Enumeration of string symbols."""

    name: str
    symbols: tuple[str, ...]

    def __post_init__(self) -> None:
        """Reject duplicate symbols."""
        if len(set(self.symbols)) != len(self.symbols):
            msg = f"Enum {self.name!r} has duplicate symbols."
            raise ValueError(msg)


class ArrayTypeSpec(TypeSpecBase, tag="array", frozen=True):
    """Ordered sequence of a single element type."""

    items: TypeSpec


class MapTypeSpec(TypeSpecBase, tag="map", frozen=True):
    """String-keyed map of a single value type."""

    values: TypeSpec


class UnionTypeSpec(TypeSpecBase, tag="union", frozen=True):
    """Union of branch types."""

    branches: tuple[TypeSpec, ...]


class FieldSpec(StructBaseStrict, frozen=True):
    """Named record field."""

    name: str
    type: TypeSpec
    doc: str | None = None


class RecordTypeSpec(TypeSpecBase, tag="record", frozen=True):
    """Record of named fields; field order is the ordinal order."""

    name: str
    fields: tuple[FieldSpec, ...] = ()
    namespace: str | None = None

    def __post_init__(self) -> None:
        """Reject duplicate field names."""
        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                msg = f"Record {self.name!r} declares field {field.name!r} more than once."
                raise ValueError(msg)
            seen.add(field.name)

    @property
    def full_name(self) -> str:
        """Return the namespace-qualified record name."""
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def field_names(self) -> tuple[str, ...]:
        """Return field names in ordinal order."""
        return tuple(field.name for field in self.fields)

    def position(self, name: str) -> int:
        """Return the ordinal position of a field.

        Returns
        -------
        int
            Zero-based field position.

        Raises
        ------
        KeyError
            Raised when the record has no such field.
        """
        for index, field in enumerate(self.fields):
            if field.name == name:
                return index
        msg = f"Record {self.full_name!r} has no field {name!r}."
        raise KeyError(msg)

    def field(self, name: str) -> FieldSpec:
        """Return the field spec for a field name.

        Returns
        -------
        FieldSpec
            Field specification.
        """
        return self.fields[self.position(name)]


type TypeSpec = (
    PrimitiveTypeSpec
    | FixedTypeSpec
    | EnumTypeSpec
    | ArrayTypeSpec
    | MapTypeSpec
    | UnionTypeSpec
    | RecordTypeSpec
)


def encode_type_spec(spec: TypeSpec, *, pretty: bool = False) -> bytes:
    """Serialize a type spec to JSON bytes.

    Returns
    -------
    bytes
        JSON payload.
    """
    return dumps_json(spec, pretty=pretty)


def _decode_spec[T](buf: bytes | str, target_type: type[T]) -> T:
    try:
        return loads_json(buf, target_type=target_type)
    except msgspec.DecodeError as exc:
        payload = validation_error_payload(exc)
        location = payload.get("path", "$")
        msg = f"Invalid schema descriptor at {location}: {payload['summary']}"
        raise SchemaError(msg) from exc


def decode_type_spec(buf: bytes | str) -> TypeSpec:
    """Deserialize a type spec from JSON bytes.

    Returns
    -------
    TypeSpec
        Decoded type specification.

    Raises
    ------
    SchemaError
        Raised when the payload is malformed JSON or not a valid descriptor;
        the message carries msgspec's summary and JSON path.
    """
    return _decode_spec(buf, TypeSpec)


def decode_record_spec(buf: bytes | str) -> RecordTypeSpec:
    """Deserialize a record spec from JSON bytes.

    Returns
    -------
    RecordTypeSpec
        Decoded record specification.

    Raises
    ------
    SchemaError
        Raised when the payload is malformed JSON or not a valid descriptor.
    """
    return _decode_spec(buf, RecordTypeSpec)


__all__ = [
    "ArrayTypeSpec",
    "EnumTypeSpec",
    "FieldSpec",
    "FixedTypeSpec",
    "LogicalTypeName",
    "LogicalTypeSpec",
    "MapTypeSpec",
    "PrimitiveName",
    "PrimitiveTypeSpec",
    "PropValue",
    "RecordTypeSpec",
    "TypeSpec",
    "TypeSpecBase",
    "UnionTypeSpec",
    "decode_record_spec",
    "decode_type_spec",
    "encode_type_spec",
]
