"""Schema-directed conversion of loosely-typed mappings into records.

The coercer walks a record spec in field order. For each field it resolves
the effective (non-null) type, then dispatches on the logical type when one
is attached and on the storage kind otherwise. Arrays, maps and nested
records recurse through the same dispatch. The first failure aborts the
whole conversion and carries the full field path of the offending value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import cast

from coercion.config import DEFAULT_POLICY, CoercionPolicy, MissingFieldPolicy
from coercion.errors import CoercionError, MissingRequiredFieldError, NestedRecordShapeMismatchError
from coercion.logical import LOGICAL_CONVERTERS, LogicalTarget
from coercion.primitives import PRIMITIVE_CONVERTERS, to_enum_symbol, to_fixed, unsupported
from coercion.records import Record, RecordBuilder
from coercion.shapes import ValueShape, describe_shape, shape_of
from schema_spec.errors import SchemaError, map_key_segment
from schema_spec.types import (
    ArrayTypeSpec,
    EnumTypeSpec,
    FieldSpec,
    FixedTypeSpec,
    MapTypeSpec,
    PrimitiveTypeSpec,
    RecordTypeSpec,
    TypeSpec,
)
from schema_spec.walker import describe_type, effective_type, is_nullable, logical_type_of

_LOGGER = logging.getLogger(__name__)


class ValueCoercer:
    """Convert input mappings into records conforming to a record spec.

    A coercer holds only its policy, so one instance may be shared across
    threads and reused for any number of schemas and rows.
    """

    __slots__ = ("_policy",)

    def __init__(self, policy: CoercionPolicy | None = None) -> None:
        self._policy = policy or DEFAULT_POLICY

    @property
    def policy(self) -> CoercionPolicy:
        """Return the coercion policy."""
        return self._policy

    def convert(self, schema: TypeSpec, values: Mapping[str, object]) -> Record:
        """Convert one input mapping into a record.

        Parameters
        ----------
        schema
            Record spec, or a union resolving to one.
        values
            Field name to raw value mapping. Keys not declared by the schema
            are ignored.

        Returns
        -------
        Record
            Frozen record in schema field order.

        Raises
        ------
        CoercionError
            Raised when any value cannot be coerced; ``exc.path`` locates it.
        SchemaError
            Raised when the schema cannot drive conversion.
        """
        return self._convert_record(values, _record_spec(schema))

    def convert_many(
        self,
        schema: TypeSpec,
        rows: Iterable[Mapping[str, object]],
    ) -> Iterator[Record]:
        """Convert a stream of input mappings against one schema.

        Errors are prefixed with the zero-based row index.

        Yields
        ------
        Record
            Converted record for each row, in input order.
        """
        record_spec = _record_spec(schema)
        count = 0
        for index, row in enumerate(rows):
            try:
                record = self._convert_record(row, record_spec)
            except (CoercionError, SchemaError) as exc:
                exc.prepend(index)
                raise
            count += 1
            yield record
        _LOGGER.debug("Converted %d rows for record %s", count, record_spec.full_name)

    def _convert_record(self, values: object, spec: RecordTypeSpec) -> Record:
        if shape_of(values) is not ValueShape.MAPPING:
            raise NestedRecordShapeMismatchError(values, describe_type(spec), describe_shape(values))
        mapping = cast("Mapping[str, object]", values)
        builder = RecordBuilder(spec)
        for field in spec.fields:
            try:
                builder.set(field.name, self._convert_field(mapping.get(field.name), field))
            except (CoercionError, SchemaError) as exc:
                exc.prepend(field.name)
                raise
        if _LOGGER.isEnabledFor(logging.DEBUG):
            declared = set(spec.field_names)
            ignored = sorted(str(key) for key in mapping if key not in declared)
            if ignored:
                _LOGGER.debug("Ignoring undeclared keys for %s: %s", spec.full_name, ", ".join(ignored))
        return builder.build()

    def _convert_field(self, raw: object, field: FieldSpec) -> object:
        if raw is not None:
            return self._coerce(raw, field.type)
        # Ambiguous unions fail even when the value is absent.
        effective_type(field.type)
        if is_nullable(field.type):
            return None
        if self._policy.missing_required is MissingFieldPolicy.NULL:
            _LOGGER.debug("Writing null into non-nullable field %r", field.name)
            return None
        raise MissingRequiredFieldError(None, describe_type(field.type), str(ValueShape.NULL))

    def _coerce(self, value: object, declared: TypeSpec) -> object:
        concrete = effective_type(declared)
        if value is None:
            if is_nullable(declared):
                return None
            raise unsupported(value, describe_type(declared), "null is not allowed here")
        logical = logical_type_of(concrete)
        if logical is not None:
            target = LogicalTarget(
                concrete=cast("PrimitiveTypeSpec | FixedTypeSpec", concrete),
                logical=logical,
                policy=self._policy,
            )
            return LOGICAL_CONVERTERS[logical.name](value, target)
        return self._coerce_concrete(value, concrete)

    def _coerce_concrete(self, value: object, concrete: TypeSpec) -> object:
        match concrete:
            case PrimitiveTypeSpec(name=name):
                return PRIMITIVE_CONVERTERS[name](value)
            case FixedTypeSpec():
                return to_fixed(value, concrete)
            case EnumTypeSpec():
                return to_enum_symbol(value, concrete)
            case ArrayTypeSpec():
                return self._coerce_array(value, concrete)
            case MapTypeSpec():
                return self._coerce_map(value, concrete)
            case RecordTypeSpec():
                return self._convert_record(value, concrete)
            case _:
                msg = f"Nested union {describe_type(concrete)} cannot be resolved."
                raise SchemaError(msg)

    def _coerce_array(self, value: object, spec: ArrayTypeSpec) -> tuple[object, ...]:
        if shape_of(value) is not ValueShape.SEQUENCE:
            raise unsupported(value, describe_type(spec))
        converted: list[object] = []
        for index, item in enumerate(cast("Iterable[object]", value)):
            try:
                converted.append(self._coerce(item, spec.items))
            except (CoercionError, SchemaError) as exc:
                exc.prepend(index)
                raise
        return tuple(converted)

    def _coerce_map(self, value: object, spec: MapTypeSpec) -> Mapping[str, object]:
        if shape_of(value) is not ValueShape.MAPPING:
            raise unsupported(value, describe_type(spec))
        converted: dict[str, object] = {}
        for key, item in cast("Mapping[object, object]", value).items():
            if not isinstance(key, str):
                raise unsupported(key, "map key (string)")
            try:
                converted[key] = self._coerce(item, spec.values)
            except (CoercionError, SchemaError) as exc:
                exc.prepend(map_key_segment(key))
                raise
        return MappingProxyType(converted)


def _record_spec(schema: TypeSpec) -> RecordTypeSpec:
    concrete = effective_type(schema)
    if not isinstance(concrete, RecordTypeSpec):
        msg = f"Top-level schema must be a record, got {describe_type(schema)}."
        raise SchemaError(msg)
    return concrete


def convert(
    schema: TypeSpec,
    values: Mapping[str, object],
    *,
    policy: CoercionPolicy | None = None,
) -> Record:
    """Convert one input mapping with a one-off coercer.

    Returns
    -------
    Record
        Frozen record in schema field order.
    """
    return ValueCoercer(policy).convert(schema, values)


__all__ = ["ValueCoercer", "convert"]
