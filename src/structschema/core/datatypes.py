"""
Pydantic v2 models for parsed column types (the TypeNode tree).

A descriptor such as ``"struct<a:array<integer>,b:map<string,double>>"`` parses into
a tree of frozen, value-comparable nodes discriminated on ``kind``:

- Primitive(name) — one alias from the alias table in structschema.core.grammar.
- Array(element)
- Map(key, value) — key is string-like; enforced by the parser, not the model.
- Struct(fields) — ordered StructEntry(name, data_type) pairs; names may repeat.

Style
- Zero-IO (stdlib + pydantic only).
- Nodes keep the alias exactly as written; canonical engine names are the backend
  adapter's concern.
- ``model_dump()`` gives a JSON-ready dict form of any node.

Examples:
    >>> from structschema.core.datatypes import Array, Primitive
    >>> Array(element=Primitive(name="integer")) == Array(element=Primitive(name="integer"))
    True
    >>> Array(element=Primitive(name="integer")).model_dump()
    {'kind': 'array', 'element': {'kind': 'primitive', 'name': 'integer'}}
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Primitive",
    "Array",
    "Map",
    "StructEntry",
    "Struct",
    "TypeNode",
]


class Primitive(BaseModel):
    """
    Base, non-composite column type.

    Attributes:
        kind (Literal["primitive"]): Discriminator.
        name (str): Alias as written in the descriptor (e.g., "numeric", "integer").
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["primitive"] = "primitive"
    name: str


class Array(BaseModel):
    """Homogeneous list of ``element``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["array"] = "array"
    element: TypeNode


class Map(BaseModel):
    """
    Key/value mapping.

    Attributes:
        key (TypeNode): Key type; descriptors only admit string-like primitives here.
        value (TypeNode): Value type.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["map"] = "map"
    key: TypeNode
    value: TypeNode


class StructEntry(BaseModel):
    """One ``name:type`` member of a nested struct."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    data_type: TypeNode


class Struct(BaseModel):
    """
    Nested record type.

    Attributes:
        fields (tuple[StructEntry, ...]): Members in declaration order. Order is
            significant (it matches column order); names are not required to be unique.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["struct"] = "struct"
    fields: tuple[StructEntry, ...]

    def field_names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.fields)


TypeNode = Annotated[Union[Primitive, Array, Map, Struct], Field(discriminator="kind")]

Array.model_rebuild()
Map.model_rebuild()
StructEntry.model_rebuild()
Struct.model_rebuild()
