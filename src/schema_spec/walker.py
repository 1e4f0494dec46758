"""Effective-type and logical-type resolution for schema type specs.

Every function here is a pure function of the schema. Specs are never
mutated, so a single schema can drive any number of concurrent conversions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

from schema_spec.errors import AmbiguousUnionError, IncompatibleLogicalTypeError
from schema_spec.types import (
    ArrayTypeSpec,
    EnumTypeSpec,
    FixedTypeSpec,
    LogicalTypeName,
    LogicalTypeSpec,
    MapTypeSpec,
    PrimitiveTypeSpec,
    RecordTypeSpec,
    TypeSpec,
    UnionTypeSpec,
)


class DecimalScaleSource(StrEnum):
    """Where decimal precision and scale are read from."""

    LOGICAL_TYPE = "logical_type"
    SCHEMA_PROPS = "schema_props"


# Storage kinds each logical type may annotate; fixed is spelled "fixed".
LOGICAL_STORAGE: Final[dict[LogicalTypeName, frozenset[str]]] = {
    "date": frozenset({"int"}),
    "time-millis": frozenset({"int"}),
    "time-micros": frozenset({"long"}),
    "timestamp-millis": frozenset({"long"}),
    "timestamp-micros": frozenset({"long"}),
    "local-timestamp-millis": frozenset({"long"}),
    "local-timestamp-micros": frozenset({"long"}),
    "decimal": frozenset({"bytes", "fixed"}),
    "uuid": frozenset({"string"}),
}


def _is_null(spec: TypeSpec) -> bool:
    return isinstance(spec, PrimitiveTypeSpec) and spec.name == "null"


def is_nullable(declared: TypeSpec) -> bool:
    """Return whether a declared type admits null.

    Returns
    -------
    bool
        ``True`` for the null primitive and unions with a null branch.
    """
    if isinstance(declared, UnionTypeSpec):
        return any(_is_null(branch) for branch in declared.branches)
    return _is_null(declared)


def effective_type(declared: TypeSpec) -> TypeSpec:
    """Return the concrete type a declared type resolves to.

    A union resolves to its single non-null branch. Any other type is
    returned unchanged.

    Returns
    -------
    TypeSpec
        Concrete, non-union type.

    Raises
    ------
    AmbiguousUnionError
        Raised when a union has zero or several non-null branches.
    """
    if not isinstance(declared, UnionTypeSpec):
        return declared
    concrete = [branch for branch in declared.branches if not _is_null(branch)]
    if len(concrete) != 1:
        msg = (
            f"Union {describe_type(declared)} must have exactly one non-null branch, "
            f"found {len(concrete)}."
        )
        raise AmbiguousUnionError(msg)
    return concrete[0]


def _storage_kind(spec: TypeSpec) -> str:
    if isinstance(spec, FixedTypeSpec):
        return "fixed"
    if isinstance(spec, PrimitiveTypeSpec):
        return spec.name
    return type(spec).__name__


def logical_type_of(concrete: TypeSpec) -> LogicalTypeSpec | None:
    """Return the logical type attached to a concrete type.

    Returns
    -------
    LogicalTypeSpec | None
        Logical type annotation, or ``None`` when absent.

    Raises
    ------
    IncompatibleLogicalTypeError
        Raised when the logical type cannot annotate the storage type.
    """
    if not isinstance(concrete, (PrimitiveTypeSpec, FixedTypeSpec)):
        return None
    logical = concrete.logical
    if logical is None:
        return None
    kind = _storage_kind(concrete)
    if kind not in LOGICAL_STORAGE[logical.name]:
        allowed = ", ".join(sorted(LOGICAL_STORAGE[logical.name]))
        msg = f"Logical type {logical.name!r} cannot annotate {kind!r} (expected {allowed})."
        raise IncompatibleLogicalTypeError(msg)
    return logical


def _int_prop(
    spec: PrimitiveTypeSpec | FixedTypeSpec,
    key: str,
) -> int | None:
    value = spec.props.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Schema property {key!r} must be an integer, got {value!r}."
        raise IncompatibleLogicalTypeError(msg)
    return value


def decimal_params(
    concrete: PrimitiveTypeSpec | FixedTypeSpec,
    logical: LogicalTypeSpec,
    *,
    source: DecimalScaleSource = DecimalScaleSource.LOGICAL_TYPE,
) -> tuple[int | None, int]:
    """Resolve decimal precision and scale for a decimal-annotated type.

    ``LOGICAL_TYPE`` reads the logical type's own precision and scale.
    ``SCHEMA_PROPS`` reads ``precision``/``scale`` schema properties of the
    annotated type. In both cases a missing scale means zero.

    Returns
    -------
    tuple[int | None, int]
        Precision (``None`` when undeclared) and scale.
    """
    if source is DecimalScaleSource.SCHEMA_PROPS:
        precision = _int_prop(concrete, "precision")
        scale = _int_prop(concrete, "scale")
    else:
        precision = logical.precision
        scale = logical.scale
    return precision, scale or 0


def describe_type(spec: TypeSpec) -> str:
    """Return a short label for a type spec.

    Returns
    -------
    str
        Label such as ``decimal(10,2)`` or ``array<long>``.
    """
    if isinstance(spec, (PrimitiveTypeSpec, FixedTypeSpec)) and spec.logical is not None:
        logical = spec.logical
        if logical.name == "decimal":
            return f"decimal({logical.precision},{logical.scale or 0})"
        return logical.name
    if isinstance(spec, PrimitiveTypeSpec):
        return spec.name
    if isinstance(spec, FixedTypeSpec):
        return f"fixed {spec.name}[{spec.size}]"
    if isinstance(spec, EnumTypeSpec):
        return f"enum {spec.name}"
    if isinstance(spec, ArrayTypeSpec):
        return f"array<{describe_type(spec.items)}>"
    if isinstance(spec, MapTypeSpec):
        return f"map<{describe_type(spec.values)}>"
    if isinstance(spec, UnionTypeSpec):
        return "union<" + ",".join(describe_type(branch) for branch in spec.branches) + ">"
    if isinstance(spec, RecordTypeSpec):
        return f"record {spec.full_name}"
    return type(spec).__name__


__all__ = [
    "LOGICAL_STORAGE",
    "DecimalScaleSource",
    "decimal_params",
    "describe_type",
    "effective_type",
    "is_nullable",
    "logical_type_of",
]
