"""Record schema specifications and schema walking."""

from schema_spec.errors import AmbiguousUnionError, IncompatibleLogicalTypeError, SchemaError
from schema_spec.types import (
    ArrayTypeSpec,
    EnumTypeSpec,
    FieldSpec,
    FixedTypeSpec,
    LogicalTypeSpec,
    MapTypeSpec,
    PrimitiveTypeSpec,
    RecordTypeSpec,
    TypeSpec,
    UnionTypeSpec,
    decode_record_spec,
    decode_type_spec,
    encode_type_spec,
)
from schema_spec.walker import (
    DecimalScaleSource,
    decimal_params,
    describe_type,
    effective_type,
    is_nullable,
    logical_type_of,
)

__all__ = [
    "AmbiguousUnionError",
    "ArrayTypeSpec",
    "DecimalScaleSource",
    "EnumTypeSpec",
    "FieldSpec",
    "FixedTypeSpec",
    "IncompatibleLogicalTypeError",
    "LogicalTypeSpec",
    "MapTypeSpec",
    "PrimitiveTypeSpec",
    "RecordTypeSpec",
    "SchemaError",
    "TypeSpec",
    "UnionTypeSpec",
    "decimal_params",
    "decode_record_spec",
    "decode_type_spec",
    "describe_type",
    "effective_type",
    "encode_type_spec",
    "is_nullable",
    "logical_type_of",
]
