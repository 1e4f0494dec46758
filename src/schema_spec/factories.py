"""Helper constructors for schema type specs."""

from __future__ import annotations

from collections.abc import Mapping

from schema_spec.types import (
    ArrayTypeSpec,
    EnumTypeSpec,
    FieldSpec,
    FixedTypeSpec,
    LogicalTypeName,
    LogicalTypeSpec,
    MapTypeSpec,
    PrimitiveName,
    PrimitiveTypeSpec,
    PropValue,
    RecordTypeSpec,
    TypeSpec,
    UnionTypeSpec,
)

NULL = PrimitiveTypeSpec(name="null")
BOOLEAN = PrimitiveTypeSpec(name="boolean")
INT = PrimitiveTypeSpec(name="int")
LONG = PrimitiveTypeSpec(name="long")
FLOAT = PrimitiveTypeSpec(name="float")
DOUBLE = PrimitiveTypeSpec(name="double")
BYTES = PrimitiveTypeSpec(name="bytes")
STRING = PrimitiveTypeSpec(name="string")

_LOGICAL_BASE: dict[LogicalTypeName, PrimitiveName] = {
    "date": "int",
    "time-millis": "int",
    "time-micros": "long",
    "timestamp-millis": "long",
    "timestamp-micros": "long",
    "local-timestamp-millis": "long",
    "local-timestamp-micros": "long",
    "uuid": "string",
}


def primitive(
    name: PrimitiveName,
    *,
    props: Mapping[str, PropValue] | None = None,
) -> PrimitiveTypeSpec:
    """Return a primitive type spec.

    Returns
    -------
    PrimitiveTypeSpec
        Primitive specification.
    """
    return PrimitiveTypeSpec(name=name, props=dict(props or {}))


def logical(name: LogicalTypeName) -> PrimitiveTypeSpec:
    """Return a non-decimal logical type on its canonical storage type.

    Returns
    -------
    PrimitiveTypeSpec
        Annotated primitive specification.

    Raises
    ------
    ValueError
        Raised for ``decimal``; use :func:`decimal` instead.
    """
    base = _LOGICAL_BASE.get(name)
    if base is None:
        msg = f"Logical type {name!r} needs explicit parameters."
        raise ValueError(msg)
    return PrimitiveTypeSpec(name=base, logical=LogicalTypeSpec(name=name))


def decimal(
    precision: int,
    scale: int = 0,
    *,
    props: Mapping[str, PropValue] | None = None,
) -> PrimitiveTypeSpec:
    """Return a bytes-backed decimal type spec.

    Returns
    -------
    PrimitiveTypeSpec
        Decimal-annotated bytes specification.
    """
    return PrimitiveTypeSpec(
        name="bytes",
        logical=LogicalTypeSpec(name="decimal", precision=precision, scale=scale),
        props=dict(props or {}),
    )


def fixed_decimal(name: str, size: int, precision: int, scale: int = 0) -> FixedTypeSpec:
    """Return a fixed-backed decimal type spec.

    Returns
    -------
    FixedTypeSpec
        Decimal-annotated fixed specification.
    """
    return FixedTypeSpec(
        name=name,
        size=size,
        logical=LogicalTypeSpec(name="decimal", precision=precision, scale=scale),
    )


def fixed(name: str, size: int) -> FixedTypeSpec:
    """Return a fixed type spec.

    Returns
    -------
    FixedTypeSpec
        Fixed specification.
    """
    return FixedTypeSpec(name=name, size=size)


def enum(name: str, symbols: tuple[str, ...] | list[str]) -> EnumTypeSpec:
    """Return an enum type spec.

    Returns
    -------
    EnumTypeSpec
        Enum specification.
    """
    return EnumTypeSpec(name=name, symbols=tuple(symbols))


def nullable(spec: TypeSpec) -> UnionTypeSpec:
    """Return the nullable union ``[null, spec]``.

    Returns
    -------
    UnionTypeSpec
        Nullable union specification.
    """
    return UnionTypeSpec(branches=(NULL, spec))


def array_of(items: TypeSpec) -> ArrayTypeSpec:
    """Return an array type spec.

    Returns
    -------
    ArrayTypeSpec
        Array specification.
    """
    return ArrayTypeSpec(items=items)


def map_of(values: TypeSpec) -> MapTypeSpec:
    """Return a map type spec.

    Returns
    -------
    MapTypeSpec
        Map specification.
    """
    return MapTypeSpec(values=values)


def record(
    name: str,
    fields: Mapping[str, TypeSpec] | list[FieldSpec],
    *,
    namespace: str | None = None,
) -> RecordTypeSpec:
    """Return a record type spec from ordered fields.

    Returns
    -------
    RecordTypeSpec
        Record specification preserving field order.
    """
    if isinstance(fields, Mapping):
        specs = tuple(FieldSpec(name=key, type=value) for key, value in fields.items())
    else:
        specs = tuple(fields)
    return RecordTypeSpec(name=name, fields=specs, namespace=namespace)


__all__ = [
    "BOOLEAN",
    "BYTES",
    "DOUBLE",
    "FLOAT",
    "INT",
    "LONG",
    "NULL",
    "STRING",
    "array_of",
    "decimal",
    "enum",
    "fixed",
    "fixed_decimal",
    "logical",
    "map_of",
    "nullable",
    "primitive",
    "record",
]
