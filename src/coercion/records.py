"""Output record builder and frozen record mapping."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from schema_spec.types import RecordTypeSpec

_UNSET = object()


class Record(Mapping[str, object]):
    """Immutable, schema-ordered mapping of converted field values.

    Iteration, ``keys()`` and ``values()`` follow the record's field order.
    Nested records are ``Record`` instances and arrays are tuples.
    """

    __slots__ = ("_index", "_schema", "_values")

    def __init__(self, schema: RecordTypeSpec, values: tuple[object, ...]) -> None:
        if len(values) != len(schema.fields):
            msg = f"Record {schema.full_name!r} expects {len(schema.fields)} values, got {len(values)}."
            raise ValueError(msg)
        self._schema = schema
        self._values = values
        self._index = {field.name: position for position, field in enumerate(schema.fields)}

    @property
    def schema(self) -> RecordTypeSpec:
        """Return the record's schema."""
        return self._schema

    def __getitem__(self, key: str) -> object:
        return self._values[self._index[key]]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        body = ", ".join(f"{name}={value!r}" for name, value in zip(self._index, self._values, strict=True))
        return f"Record<{self._schema.full_name}>({body})"

    def at(self, position: int) -> object:
        """Return the value at an ordinal field position.

        Returns
        -------
        object
            Field value.
        """
        return self._values[position]

    def to_builtins(self) -> dict[str, object]:
        """Return nested builtin containers.

        Records become dicts and arrays become lists; scalars, including
        bytes, are returned unchanged.

        Returns
        -------
        dict[str, object]
            Builtin representation in field order.
        """
        return {name: _builtin(value) for name, value in zip(self._index, self._values, strict=True)}


def _builtin(value: object) -> object:
    if isinstance(value, Record):
        return value.to_builtins()
    if isinstance(value, tuple):
        return [_builtin(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _builtin(item) for key, item in value.items()}
    return value


class RecordBuilder:
    """Mutable build target with one slot per schema field.

    A slot is written exactly once. :meth:`build` freezes the slots into a
    :class:`Record` once every field is set.
    """

    __slots__ = ("_index", "_schema", "_slots")

    def __init__(self, schema: RecordTypeSpec) -> None:
        self._schema = schema
        self._index = {field.name: position for position, field in enumerate(schema.fields)}
        self._slots: list[object] = [_UNSET] * len(schema.fields)

    def set(self, name: str, value: object) -> None:
        """Set a field value.

        Raises
        ------
        KeyError
            Raised when the schema has no such field.
        ValueError
            Raised when the field was already set.
        """
        position = self._index.get(name)
        if position is None:
            msg = f"Record {self._schema.full_name!r} has no field {name!r}."
            raise KeyError(msg)
        if self._slots[position] is not _UNSET:
            msg = f"Field {name!r} of {self._schema.full_name!r} is already set."
            raise ValueError(msg)
        self._slots[position] = value

    def is_set(self, name: str) -> bool:
        """Return whether a field has been set."""
        return self._slots[self._index[name]] is not _UNSET

    def missing(self) -> tuple[str, ...]:
        """Return the names of fields not yet set."""
        return tuple(name for name, position in self._index.items() if self._slots[position] is _UNSET)

    def build(self) -> Record:
        """Freeze the builder into a record.

        Returns
        -------
        Record
            Immutable record.

        Raises
        ------
        ValueError
            Raised when any field is unset.
        """
        missing = self.missing()
        if missing:
            msg = f"Record {self._schema.full_name!r} has unset fields: {', '.join(missing)}."
            raise ValueError(msg)
        return Record(self._schema, tuple(self._slots))


__all__ = ["Record", "RecordBuilder"]
