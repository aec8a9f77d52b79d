"""
Schema entities: named, typed, nullable fields composed into an ordered StructType.

Each entity has two explicit construction paths instead of argument-type dispatch:

| Path              | Field                              | Schema
|-------------------|------------------------------------|-----------------------------------
| from descriptor   | StructField.from_descriptor        | StructType.from_fields
| from backend      | BackendStructField.from_handle     | BackendStructType.from_handle

Local entities are plain immutable values (pydantic/dataclass) and need no backend.
Backend entities hold a handle plus the adapter that owns it; each accessor is one
synchronous adapter round trip and nothing is memoized.

Responsibilities
- Validate factory arguments eagerly (ArgumentError) and run the descriptor parser
  (ValidationError propagates unchanged).
- Keep StructType ordered and non-empty, holding only genuine schema fields.
- Offer an explicit, opt-in field-name uniqueness check (ensure_unique_field_names).

Style
- Zero-IO (stdlib + pydantic only).
- Google-style docstrings with Args, Returns, Raises, Examples.

References
- grammar: src/structschema/core/grammar.py (parse_type)
- adapter: src/structschema/core/adapter.py (BackendAdapter)
- printer: src/structschema/core/printer.py (rendering of the entities below)
- tests: tests/core/*
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict

from .adapter import BackendAdapter
from .datatypes import Array, Map, Primitive, Struct, TypeNode
from .errors import ArgumentError, ValidationError
from .grammar import parse_type
from .typing import FieldHandle, TypeHandle

__all__ = [
    "StructField",
    "BackendStructField",
    "SchemaField",
    "StructType",
    "BackendStructType",
    "struct_field",
    "struct_type",
    "ensure_unique_field_names",
]


# ============================================================================
# Fields
# ============================================================================


class StructField(BaseModel):
    """
    One schema column built from a descriptor.

    Attributes:
        source (Literal["descriptor"]): Construction path discriminator.
        name (str): Column name (non-empty).
        data_type (TypeNode): Parsed column type.
        nullable (bool): Whether the column admits nulls.

    Notes:
        Prefer StructField.from_descriptor (or struct_field); constructing the model
        directly bypasses descriptor parsing and reports pydantic errors instead.

    Examples:
        >>> from structschema.core.schema import StructField
        >>> f = StructField.from_descriptor("a", "array<integer>", False)
        >>> f.data_type.kind, f.nullable
        ('array', False)
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    source: Literal["descriptor"] = "descriptor"
    name: str
    data_type: TypeNode
    nullable: bool = True

    @classmethod
    def from_descriptor(cls, name: str, descriptor: str, nullable: bool = True) -> StructField:
        """
        Build a field from a name, a type descriptor, and a nullability flag.

        Args:
            name (str): Column name; must be a non-empty str.
            descriptor (str): Type descriptor, e.g. "map<string,double>".
            nullable (bool): Must be a bool (not merely truthy).

        Returns:
            StructField: Immutable field wrapping the parsed TypeNode.

        Raises:
            ArgumentError: If name is not a non-empty str, descriptor is not a str, or
                nullable is not a bool.
            ValidationError: If the descriptor is invalid (raised by the parser).
        """
        if not isinstance(name, str):
            raise ArgumentError(f"field name must be a string, got {type(name).__name__}")
        if not name:
            raise ArgumentError("field name must be non-empty")
        if not isinstance(descriptor, str):
            raise ArgumentError(f"field type must be a string, got {type(descriptor).__name__}")
        if not isinstance(nullable, bool):
            raise ArgumentError(f"nullable must be either True or False, got {nullable!r}")
        return cls(name=name, data_type=parse_type(descriptor), nullable=nullable)


@dataclass(frozen=True)
class BackendStructField:
    """
    Schema column hydrated from a backend handle.

    Attributes:
        handle (FieldHandle): Non-owning lookup key for the backend field object.
        adapter (BackendAdapter): Adapter that owns the handle.

    Notes:
        Every property below makes a fresh adapter call; results are never cached,
        so a released handle surfaces as BackendError on the next access.
    """

    source: ClassVar[str] = "backend"

    handle: FieldHandle
    adapter: BackendAdapter

    @classmethod
    def from_handle(cls, handle: FieldHandle, adapter: BackendAdapter) -> BackendStructField:
        if not isinstance(adapter, BackendAdapter):
            raise ArgumentError(f"adapter must implement BackendAdapter, got {type(adapter).__name__}")
        return cls(handle=handle, adapter=adapter)

    @property
    def name(self) -> str:
        return self.adapter.field_name(self.handle)

    @property
    def data_type(self) -> TypeHandle:
        return self.adapter.field_type(self.handle)

    @property
    def nullable(self) -> bool:
        return self.adapter.field_nullable(self.handle)

    @property
    def type_string(self) -> str:
        """Engine display of the field type (``type_to_string``)."""
        return self.adapter.type_to_string(self.data_type)

    @property
    def type_simple_string(self) -> str:
        """Abbreviated engine display of the field type (``type_to_simple_string``)."""
        return self.adapter.type_to_simple_string(self.data_type)


SchemaField = Union[StructField, BackendStructField]

_FIELD_TYPES: tuple[type, ...] = (StructField, BackendStructField)


# ============================================================================
# Schemas
# ============================================================================


@dataclass(frozen=True)
class StructType:
    """
    Ordered, non-empty collection of schema fields describing a full row.

    Attributes:
        fields (tuple[SchemaField, ...]): Fields in column order.

    Raises:
        ArgumentError: If fields is empty or holds anything other than StructField /
            BackendStructField instances.

    Examples:
        >>> from structschema.core.schema import struct_field, struct_type
        >>> schema = struct_type(struct_field("a", "integer"), struct_field("b", "string"))
        >>> schema.field_names()
        ('a', 'b')
    """

    fields: tuple[SchemaField, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.fields, (tuple, list)):
            raise ArgumentError(
                f"fields must be a sequence of schema fields, got {type(self.fields).__name__}"
            )
        if not all(isinstance(f, _FIELD_TYPES) for f in self.fields):
            raise ArgumentError("all arguments must be schema fields")
        if not self.fields:
            raise ArgumentError("a struct type needs at least one field")
        object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def from_fields(cls, *fields: SchemaField) -> StructType:
        return cls(fields=fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[SchemaField]:
        return iter(self.fields)

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class BackendStructType:
    """
    Schema hydrated from a backend struct-type handle.

    ``fields`` queries the adapter on every access and wraps each returned handle in a
    fresh BackendStructField.
    """

    handle: TypeHandle
    adapter: BackendAdapter

    @classmethod
    def from_handle(cls, handle: TypeHandle, adapter: BackendAdapter) -> BackendStructType:
        if not isinstance(adapter, BackendAdapter):
            raise ArgumentError(f"adapter must implement BackendAdapter, got {type(adapter).__name__}")
        return cls(handle=handle, adapter=adapter)

    @property
    def fields(self) -> tuple[BackendStructField, ...]:
        return tuple(
            BackendStructField.from_handle(h, self.adapter)
            for h in self.adapter.type_fields(self.handle)
        )

    @property
    def type_string(self) -> str:
        return self.adapter.type_to_string(self.handle)

    @property
    def simple_string(self) -> str:
        return self.adapter.type_to_simple_string(self.handle)

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


# ============================================================================
# Public construction surface
# ============================================================================


def struct_field(name: str, descriptor: str, nullable: bool = True) -> StructField:
    """
    Create a schema field from a descriptor.

    Args:
        name (str): Column name.
        descriptor (str): Type descriptor.
        nullable (bool): Defaults to True.

    Returns:
        StructField: Validated field.

    Raises:
        ArgumentError: On argument kind errors.
        ValidationError: On descriptor errors.

    Examples:
        >>> struct_field("b", "map<string,double>").data_type.kind
        'map'
    """
    return StructField.from_descriptor(name, descriptor, nullable)


def struct_type(*fields: SchemaField) -> StructType:
    """
    Create a schema from one or more fields, preserving order.

    Raises:
        ArgumentError: If no field is given or any argument is not a schema field.
    """
    return StructType.from_fields(*fields)


# ============================================================================
# Uniqueness (opt-in)
# ============================================================================


def _duplicates(names: Iterable[str]) -> list[str]:
    counts = Counter(names)
    return sorted(n for n, c in counts.items() if c > 1)


def _nested_duplicates(node: TypeNode, path: str, found: list[str]) -> None:
    if isinstance(node, Array):
        _nested_duplicates(node.element, f"{path}[]", found)
    elif isinstance(node, Map):
        _nested_duplicates(node.value, f"{path}{{}}", found)
    elif isinstance(node, Struct):
        found.extend(f"{path}.{n}" for n in _duplicates(node.field_names()))
        for entry in node.fields:
            _nested_duplicates(entry.data_type, f"{path}.{entry.name}", found)


def ensure_unique_field_names(target: StructType | BackendStructType | TypeNode) -> None:
    """
    Require unique field names at every struct level.

    The descriptor grammar itself admits repeated names; call this when a consumer
    needs them unique. Hydrated fields contribute their names only (their types are
    not local trees), and a BackendStructType is checked at its top level only.

    Args:
        target (StructType | BackendStructType | TypeNode): Schema or parsed node to check.

    Raises:
        ArgumentError: If target is not a schema or a TypeNode.
        ValidationError: Listing every duplicated name with its path (e.g. "a.x").

    Examples:
        >>> from structschema.core.grammar import parse_type
        >>> ensure_unique_field_names(parse_type("struct<a:integer,b:integer>"))
    """
    found: list[str] = []
    if isinstance(target, StructType):
        found.extend(_duplicates(target.field_names()))
        for f in target.fields:
            if isinstance(f, StructField):
                _nested_duplicates(f.data_type, f.name, found)
    elif isinstance(target, BackendStructType):
        found.extend(_duplicates(target.field_names()))
    elif isinstance(target, Struct):
        found.extend(_duplicates(target.field_names()))
        for entry in target.fields:
            _nested_duplicates(entry.data_type, entry.name, found)
    elif isinstance(target, (Array, Map, Primitive)):
        _nested_duplicates(target, "", found)
    else:
        raise ArgumentError(f"cannot check field names of {type(target).__name__}")
    if found:
        raise ValidationError(f"duplicate field names: {', '.join(found)}")
