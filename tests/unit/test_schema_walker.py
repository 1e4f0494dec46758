"""Tests for effective-type and logical-type resolution."""

from __future__ import annotations

import pytest

from schema_spec.errors import AmbiguousUnionError, IncompatibleLogicalTypeError
from schema_spec.factories import (
    INT,
    LONG,
    NULL,
    STRING,
    array_of,
    decimal,
    fixed_decimal,
    logical,
    map_of,
    nullable,
    primitive,
    record,
)
from schema_spec.types import LogicalTypeSpec, PrimitiveTypeSpec, TypeSpec, UnionTypeSpec
from schema_spec.walker import (
    DecimalScaleSource,
    decimal_params,
    describe_type,
    effective_type,
    is_nullable,
    logical_type_of,
)

_PROPS_SCALE = 3


def test_effective_type_unwraps_nullable_union() -> None:
    """A [null, T] union resolves to T."""
    assert effective_type(nullable(LONG)) == LONG


def test_effective_type_ignores_branch_order() -> None:
    """The null branch may come after the concrete branch."""
    union = UnionTypeSpec(branches=(STRING, NULL))
    assert effective_type(union) == STRING


def test_effective_type_returns_non_union_unchanged() -> None:
    """Non-union types are their own effective type."""
    spec = array_of(INT)
    assert effective_type(spec) is spec


def test_effective_type_single_branch_union() -> None:
    """A union with one non-null branch and no null resolves to it."""
    assert effective_type(UnionTypeSpec(branches=(INT,))) == INT


@pytest.mark.parametrize(
    "union",
    [
        UnionTypeSpec(branches=(NULL, INT, STRING)),
        UnionTypeSpec(branches=(INT, STRING)),
        UnionTypeSpec(branches=(NULL,)),
        UnionTypeSpec(branches=()),
    ],
)
def test_effective_type_rejects_ambiguous_unions(union: UnionTypeSpec) -> None:
    """Unions without exactly one non-null branch are ambiguous."""
    with pytest.raises(AmbiguousUnionError, match="exactly one non-null branch"):
        effective_type(union)


def test_is_nullable() -> None:
    """Nullability comes from a null branch or the null primitive."""
    assert is_nullable(nullable(INT))
    assert is_nullable(NULL)
    assert not is_nullable(INT)
    assert not is_nullable(UnionTypeSpec(branches=(INT,)))


def test_logical_type_of_returns_annotation() -> None:
    """Annotated primitives expose their logical type."""
    resolved = logical_type_of(logical("date"))
    assert resolved == LogicalTypeSpec(name="date")


def test_logical_type_of_plain_types() -> None:
    """Plain primitives and complex types carry no logical type."""
    assert logical_type_of(INT) is None
    assert logical_type_of(record("Empty", {})) is None
    assert logical_type_of(map_of(INT)) is None


def test_logical_type_of_rejects_wrong_storage() -> None:
    """A date annotation on a string is rejected."""
    spec = PrimitiveTypeSpec(name="string", logical=LogicalTypeSpec(name="date"))
    with pytest.raises(IncompatibleLogicalTypeError, match="cannot annotate 'string'"):
        logical_type_of(spec)


def test_logical_type_of_accepts_fixed_decimal() -> None:
    """Decimals may annotate fixed types."""
    spec = fixed_decimal("Money", 8, precision=18, scale=4)
    resolved = logical_type_of(spec)
    assert resolved is not None
    assert resolved.name == "decimal"


def test_decimal_params_from_logical_type() -> None:
    """The default source is the logical type's own metadata."""
    spec = decimal(10, 2, props={"scale": _PROPS_SCALE})
    assert spec.logical is not None
    assert decimal_params(spec, spec.logical) == (10, 2)


def test_decimal_params_from_schema_props() -> None:
    """The props source reads schema properties instead."""
    spec = decimal(10, 2, props={"scale": _PROPS_SCALE})
    assert spec.logical is not None
    params = decimal_params(spec, spec.logical, source=DecimalScaleSource.SCHEMA_PROPS)
    assert params == (None, _PROPS_SCALE)


def test_decimal_params_props_default_scale() -> None:
    """A missing scale property means scale zero."""
    spec = decimal(10, 2)
    assert spec.logical is not None
    assert decimal_params(spec, spec.logical, source=DecimalScaleSource.SCHEMA_PROPS) == (None, 0)


def test_decimal_params_rejects_non_integer_props() -> None:
    """Scale properties must be integers."""
    spec = decimal(10, 2, props={"scale": "two"})
    assert spec.logical is not None
    with pytest.raises(IncompatibleLogicalTypeError, match="must be an integer"):
        decimal_params(spec, spec.logical, source=DecimalScaleSource.SCHEMA_PROPS)


@pytest.mark.parametrize(
    ("spec", "label"),
    [
        (INT, "int"),
        (decimal(10, 2), "decimal(10,2)"),
        (array_of(LONG), "array<long>"),
        (map_of(logical("uuid")), "map<uuid>"),
        (nullable(STRING), "union<null,string>"),
        (record("Order", {}, namespace="shop"), "record shop.Order"),
        (primitive("bytes"), "bytes"),
    ],
)
def test_describe_type(spec: TypeSpec, label: str) -> None:
    """Type labels are short and readable."""
    assert describe_type(spec) == label
