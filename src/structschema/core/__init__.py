"""
Core package for structschema contracts (grammar, type nodes, entities, printer, errors).

## Contracts (single source of truth)
- Grammar — EBNF (types.ebnf), primitive alias table, depth-aware splitter, parser/validator.
- Datatypes — frozen TypeNode models (Primitive, Array, Map, Struct).
- Schema — StructField / StructType entities and their backend-hydrated counterparts.
- Printer — canonical display text for types, fields and schemas.
- Adapter — BackendAdapter capability protocol consumed by hydrated entities.
- Errors — ValidationError, ArgumentError, BackendError.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO beyond reading types.ebnf.
- Parsing, validation and printing are pure and uncached.
- Aliases are kept as written; canonicalization is an adapter concern.

## Downstream usage
- structschema.backend — realizes schemas as Polars dtypes behind the BackendAdapter protocol.
- structschema.cli — command line checks and schema printing.

## Examples
```python
from structschema.core import parse_type, print_schema, struct_field, struct_type

parse_type("array<integer>")  # Array(element=Primitive(name='integer'))
schema = struct_type(struct_field("a", "integer"), struct_field("b", "string", False))
print_schema(schema)
# StructType
# |- name = "a", type = "integer", nullable = true
# |- name = "b", type = "string", nullable = false
```
"""

from __future__ import annotations

from .adapter import BackendAdapter
from .datatypes import Array, Map, Primitive, Struct, StructEntry, TypeNode
from .errors import ArgumentError, BackendError, ValidationError
from .grammar import PrimitiveKind, check_type, is_valid_type, parse_type, split_top_level
from .printer import print_schema, render, render_field, render_struct_type, render_type
from .schema import (
    BackendStructField,
    BackendStructType,
    SchemaField,
    StructField,
    StructType,
    ensure_unique_field_names,
    struct_field,
    struct_type,
)

__all__ = [
    "BackendAdapter",
    "Array",
    "Map",
    "Primitive",
    "Struct",
    "StructEntry",
    "TypeNode",
    "ArgumentError",
    "BackendError",
    "ValidationError",
    "PrimitiveKind",
    "check_type",
    "is_valid_type",
    "parse_type",
    "split_top_level",
    "print_schema",
    "render",
    "render_field",
    "render_struct_type",
    "render_type",
    "BackendStructField",
    "BackendStructType",
    "SchemaField",
    "StructField",
    "StructType",
    "ensure_unique_field_names",
    "struct_field",
    "struct_type",
]
