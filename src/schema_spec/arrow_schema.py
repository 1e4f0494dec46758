"""Arrow storage schemas for converted records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import pyarrow as pa

from schema_spec.types import (
    ArrayTypeSpec,
    EnumTypeSpec,
    FixedTypeSpec,
    MapTypeSpec,
    PrimitiveName,
    PrimitiveTypeSpec,
    RecordTypeSpec,
    TypeSpec,
    UnionTypeSpec,
)
from schema_spec.walker import effective_type, is_nullable, logical_type_of

_PRIMITIVE_STORAGE: dict[PrimitiveName, pa.DataType] = {
    "null": pa.null(),
    "boolean": pa.bool_(),
    "int": pa.int32(),
    "long": pa.int64(),
    "float": pa.float32(),
    "double": pa.float64(),
    "bytes": pa.binary(),
    "string": pa.string(),
}


def storage_type(spec: TypeSpec) -> pa.DataType:
    """Return the Arrow storage type for a schema type spec.

    Logical types keep the storage type of their encoding: a ``date`` is an
    ``int32`` day count and a ``decimal`` is its unscaled ``binary`` bytes.

    Returns
    -------
    pyarrow.DataType
        Arrow storage type.

    Raises
    ------
    TypeError
        Raised for type specs with no Arrow mapping.
    """
    if isinstance(spec, UnionTypeSpec):
        if all(isinstance(branch, PrimitiveTypeSpec) and branch.name == "null" for branch in spec.branches):
            return pa.null()
        return storage_type(effective_type(spec))
    # Rejects logical annotations on the wrong storage type.
    logical_type_of(spec)
    if isinstance(spec, PrimitiveTypeSpec):
        return _PRIMITIVE_STORAGE[spec.name]
    if isinstance(spec, FixedTypeSpec):
        return pa.binary(spec.size)
    if isinstance(spec, EnumTypeSpec):
        return pa.string()
    if isinstance(spec, ArrayTypeSpec):
        return pa.list_(storage_field("item", spec.items))
    if isinstance(spec, MapTypeSpec):
        return pa.map_(pa.string(), storage_type(spec.values))
    if isinstance(spec, RecordTypeSpec):
        return pa.struct([storage_field(field.name, field.type) for field in spec.fields])
    msg = f"Unsupported type spec for Arrow storage: {spec!r}."
    raise TypeError(msg)


def storage_field(name: str, spec: TypeSpec) -> pa.Field:
    """Return an Arrow field carrying storage type and nullability.

    Returns
    -------
    pyarrow.Field
        Arrow field definition.
    """
    return pa.field(name, storage_type(spec), nullable=is_nullable(spec))


def arrow_schema(spec: RecordTypeSpec) -> pa.Schema:
    """Return the Arrow storage schema for a record spec.

    Returns
    -------
    pyarrow.Schema
        Schema with one field per record field, in ordinal order.
    """
    return pa.schema(
        [storage_field(field.name, field.type) for field in spec.fields],
        metadata={"record_name": spec.full_name},
    )


def records_to_table(records: Iterable[Mapping[str, object]], spec: RecordTypeSpec) -> pa.Table:
    """Build an Arrow table from converted records.

    Returns
    -------
    pyarrow.Table
        Table conforming to :func:`arrow_schema`.
    """
    rows = [_storage_value(record, spec) for record in records]
    return pa.Table.from_pylist(rows, schema=arrow_schema(spec))


def _storage_value(value: object, spec: TypeSpec) -> object:
    if value is None:
        return None
    if isinstance(spec, UnionTypeSpec):
        return _storage_value(value, effective_type(spec))
    if isinstance(spec, RecordTypeSpec) and isinstance(value, Mapping):
        return {field.name: _storage_value(value.get(field.name), field.type) for field in spec.fields}
    if isinstance(spec, ArrayTypeSpec) and isinstance(value, (list, tuple)):
        return [_storage_value(item, spec.items) for item in value]
    if isinstance(spec, MapTypeSpec) and isinstance(value, Mapping):
        return [(key, _storage_value(item, spec.values)) for key, item in value.items()]
    return value


__all__ = ["arrow_schema", "records_to_table", "storage_field", "storage_type"]
