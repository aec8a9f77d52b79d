"""
Polars-backed implementation of the BackendAdapter protocol.

Engine-side schema objects are Polars dtypes kept in a handle registry owned by one
adapter instance. Entities hydrated from this adapter only hold integer handles.

Responsibilities
- Canonicalize primitive aliases (numeric -> double, character -> string, raw -> binary,
  logical -> boolean) and map them to Polars dtypes.
- Register fields and struct types, hand out handles, and resolve them on every call.
- Invalidate handles on release(); later lookups raise BackendError.
- Expose the downstream engine view: polars_schema() and empty_frame().

Dtype mapping
-------------

| Canonical    | Polars dtype
|--------------|---------------------------------------------
| byte         | Int8
| integer      | Int32
| float        | Float32
| double       | Float64
| string       | Utf8
| binary       | Binary
| boolean      | Boolean
| timestamp    | Datetime(settings.timestamp_unit, settings.timestamp_time_zone)
| date         | Date
| array<T>     | List(T)
| map<K,V>     | List(Struct({"key": K, "value": V}))
| struct<...>  | Struct(...)

Notes
- type_to_string returns the Polars dtype text; type_to_simple_string returns the
  canonical descriptor text, which always re-parses with structschema.core.grammar.
- Polars dtypes carry no nullability; the registry records it per field.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

import polars as pl

from structschema.core.datatypes import Array, Map, Primitive, Struct, StructEntry, TypeNode
from structschema.core.errors import ArgumentError, BackendError
from structschema.core.grammar import PrimitiveKind, canonical_primitive, parse_type
from structschema.core.printer import render_type
from structschema.core.typing import FieldHandle, TypeHandle

from .config import BackendSettings

__all__ = [
    "canonicalize",
    "PolarsBackend",
]

logger = logging.getLogger(__name__)

# Dtype instances (not classes) so str() and equality behave uniformly with List/Struct.
_PRIMITIVE_DTYPES: dict[PrimitiveKind, object] = {
    PrimitiveKind.BYTE: pl.Int8(),
    PrimitiveKind.INTEGER: pl.Int32(),
    PrimitiveKind.FLOAT: pl.Float32(),
    PrimitiveKind.DOUBLE: pl.Float64(),
    PrimitiveKind.STRING: pl.Utf8(),
    PrimitiveKind.BINARY: pl.Binary(),
    PrimitiveKind.BOOLEAN: pl.Boolean(),
    PrimitiveKind.DATE: pl.Date(),
    # "timestamp" depends on settings; handled in PolarsBackend._dtype
}


def canonicalize(node: TypeNode) -> TypeNode:
    """
    Replace every primitive alias in a tree with its canonical name.

    Examples:
        >>> from structschema.core.grammar import parse_type
        >>> render_type(canonicalize(parse_type("map<character,array<numeric>>")))
        'map<string,array<double>>'
    """
    if isinstance(node, Primitive):
        return Primitive(name=canonical_primitive(node.name).value)
    if isinstance(node, Array):
        return Array(element=canonicalize(node.element))
    if isinstance(node, Map):
        return Map(key=canonicalize(node.key), value=canonicalize(node.value))
    return Struct(
        fields=tuple(
            StructEntry(name=e.name, data_type=canonicalize(e.data_type)) for e in node.fields
        )
    )


@dataclass(frozen=True, slots=True)
class _FieldRecord:
    name: str
    type_handle: TypeHandle
    nullable: bool


@dataclass(frozen=True, slots=True)
class _TypeRecord:
    node: TypeNode  # canonical
    dtype: pl.DataType
    fields: tuple[FieldHandle, ...] | None = None


class PolarsBackend:
    """
    In-process schema backend realizing types as Polars dtypes.

    Args:
        settings (BackendSettings | None): Backend settings; defaults to BackendSettings().

    Examples:
        >>> backend = PolarsBackend()
        >>> fh = backend.create_struct_field("a", "array<integer>", True)
        >>> backend.type_to_simple_string(backend.field_type(fh))
        'array<integer>'
    """

    def __init__(self, settings: BackendSettings | None = None) -> None:
        self.settings = settings or BackendSettings()
        self._counter = itertools.count(1)
        self._fields: dict[FieldHandle, _FieldRecord] = {}
        self._types: dict[TypeHandle, _TypeRecord] = {}

    # -- registry -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self._fields) + len(self._types)

    def _field(self, handle: FieldHandle) -> _FieldRecord:
        try:
            return self._fields[handle]
        except KeyError as exc:
            raise BackendError(f"unknown or released field handle: {handle!r}") from exc

    def _type(self, handle: TypeHandle) -> _TypeRecord:
        try:
            return self._types[handle]
        except KeyError as exc:
            raise BackendError(f"unknown or released type handle: {handle!r}") from exc

    def _register_type(self, record: _TypeRecord) -> TypeHandle:
        handle = TypeHandle(next(self._counter))
        self._types[handle] = record
        logger.debug("registered type handle %d: %s", handle, render_type(record.node))
        return handle

    def _register_field(self, record: _FieldRecord) -> FieldHandle:
        handle = FieldHandle(next(self._counter))
        self._fields[handle] = record
        logger.debug("registered field handle %d: %s", handle, record.name)
        return handle

    def release(self, handle: FieldHandle | TypeHandle) -> None:
        """
        Invalidate a field or type handle. Entities still holding it fail with
        BackendError on their next access.

        Raises:
            BackendError: If the handle is unknown or already released.
        """
        if handle in self._fields:
            del self._fields[handle]  # type: ignore[arg-type]
        elif handle in self._types:
            del self._types[handle]  # type: ignore[arg-type]
        else:
            raise BackendError(f"unknown or released handle: {handle!r}")
        logger.debug("released handle %d", handle)

    # -- dtype mapping ------------------------------------------------------

    def _dtype(self, node: TypeNode) -> pl.DataType:
        if isinstance(node, Primitive):
            kind = canonical_primitive(node.name)
            if kind is PrimitiveKind.TIMESTAMP:
                return pl.Datetime(
                    time_unit=self.settings.timestamp_unit,
                    time_zone=self.settings.timestamp_time_zone,
                )
            return _PRIMITIVE_DTYPES[kind]  # type: ignore[return-value]
        if isinstance(node, Array):
            return pl.List(self._dtype(node.element))
        if isinstance(node, Map):
            return pl.List(
                pl.Struct([pl.Field("key", self._dtype(node.key)), pl.Field("value", self._dtype(node.value))])
            )
        return pl.Struct([pl.Field(e.name, self._dtype(e.data_type)) for e in node.fields])

    # -- BackendAdapter -----------------------------------------------------

    def create_struct_field(self, name: str, type_descriptor: str, nullable: bool) -> FieldHandle:
        """
        Register a field from a descriptor.

        Raises:
            ArgumentError: On argument kind errors.
            ValidationError: If the descriptor does not parse.
        """
        if not isinstance(name, str) or not name:
            raise ArgumentError(f"field name must be a non-empty string, got {name!r}")
        if not isinstance(type_descriptor, str):
            raise ArgumentError(f"field type must be a string, got {type(type_descriptor).__name__}")
        if not isinstance(nullable, bool):
            raise ArgumentError(f"nullable must be either True or False, got {nullable!r}")
        node = canonicalize(parse_type(type_descriptor))
        type_handle = self._register_type(_TypeRecord(node=node, dtype=self._dtype(node)))
        return self._register_field(
            _FieldRecord(name=name, type_handle=type_handle, nullable=nullable)
        )

    def create_struct_type(self, fields: Sequence[FieldHandle]) -> TypeHandle:
        """
        Register a struct type over existing field handles (order preserved).

        Raises:
            ArgumentError: If fields is empty.
            BackendError: If any handle is unknown to this adapter.
        """
        handles = tuple(fields)
        if not handles:
            raise ArgumentError("a struct type needs at least one field")
        records = [self._field(h) for h in handles]
        entries = tuple(
            StructEntry(name=r.name, data_type=self._type(r.type_handle).node) for r in records
        )
        dtype = pl.Struct([pl.Field(r.name, self._type(r.type_handle).dtype) for r in records])
        return self._register_type(
            _TypeRecord(node=Struct(fields=entries), dtype=dtype, fields=handles)
        )

    def field_name(self, handle: FieldHandle) -> str:
        return self._field(handle).name

    def field_type(self, handle: FieldHandle) -> TypeHandle:
        return self._field(handle).type_handle

    def field_nullable(self, handle: FieldHandle) -> bool:
        return self._field(handle).nullable

    def type_fields(self, handle: TypeHandle) -> tuple[FieldHandle, ...]:
        """
        Field handles of a struct type.

        Nested struct types obtained through field_type() get their member handles
        registered on first request (members are nullable, as nested descriptors carry
        no nullability).

        Raises:
            BackendError: If the handle is unknown or not a struct type.
        """
        record = self._type(handle)
        if record.fields is not None:
            return record.fields
        if not isinstance(record.node, Struct):
            raise BackendError(
                f"type handle {handle!r} is not a struct type: {render_type(record.node)}"
            )
        members = tuple(
            self._register_field(
                _FieldRecord(
                    name=e.name,
                    type_handle=self._register_type(
                        _TypeRecord(node=e.data_type, dtype=self._dtype(e.data_type))
                    ),
                    nullable=True,
                )
            )
            for e in record.node.fields
        )
        self._types[handle] = replace(record, fields=members)
        return members

    def type_to_string(self, handle: TypeHandle) -> str:
        return str(self._type(handle).dtype)

    def type_to_simple_string(self, handle: TypeHandle) -> str:
        return render_type(self._type(handle).node)

    # -- engine view --------------------------------------------------------

    def polars_dtype(self, handle: TypeHandle) -> pl.DataType:
        return self._type(handle).dtype

    def polars_schema(self, handle: TypeHandle) -> pl.Schema:
        """
        Column name -> dtype mapping for a struct type, in field order.

        Raises:
            BackendError: If the handle is unknown or not a struct type, and when a
                column name repeats (Polars columns must be unique).
        """
        columns = [
            (self.field_name(fh), self._type(self.field_type(fh)).dtype)
            for fh in self.type_fields(handle)
        ]
        names = [name for name, _ in columns]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise BackendError(f"duplicate column names in struct type {handle!r}: {duplicates}")
        return pl.Schema(columns)

    def empty_frame(self, handle: TypeHandle) -> pl.DataFrame:
        """Zero-row DataFrame with the struct type's columns."""
        return pl.DataFrame(schema=self.polars_schema(handle))
