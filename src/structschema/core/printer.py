"""
Deterministic text rendering of type nodes and schema entities.

Formats (byte for byte):

    render_type:        integer | array<T> | map<K,V> | struct<a:T,b:U>
    render_field:       StructField(name = "a", type = "integer", nullable = true)
    render_struct_type: StructType
                        |- name = "a", type = "integer", nullable = true
                        |- name = "b", type = "string", nullable = false

Notes:
    - Local fields display their parsed TypeNode; hydrated fields display the adapter's
      ``type_to_string``. Nothing else touches the adapter.
    - Rendering never mutates its input. For canonical descriptors
      ``render_type(parse_type(s)) == s``.
"""

from __future__ import annotations

import sys
from typing import TextIO

from .datatypes import Array, Map, Primitive, Struct, TypeNode
from .errors import ArgumentError
from .schema import BackendStructField, BackendStructType, SchemaField, StructField, StructType

__all__ = [
    "render_type",
    "render_bool",
    "render_field",
    "render_struct_type",
    "render",
    "print_schema",
]


def render_type(node: TypeNode) -> str:
    """Render a TypeNode as descriptor text."""
    if isinstance(node, Primitive):
        return node.name
    if isinstance(node, Array):
        return f"array<{render_type(node.element)}>"
    if isinstance(node, Map):
        return f"map<{render_type(node.key)},{render_type(node.value)}>"
    if isinstance(node, Struct):
        members = ",".join(f"{e.name}:{render_type(e.data_type)}" for e in node.fields)
        return f"struct<{members}>"
    raise ArgumentError(f"not a type node: {type(node).__name__}")


def render_bool(value: bool) -> str:
    return "true" if value else "false"


def _type_text(field: SchemaField) -> str:
    if isinstance(field, StructField):
        return render_type(field.data_type)
    return field.type_string


def _field_body(field: SchemaField) -> str:
    return (
        f'name = "{field.name}", type = "{_type_text(field)}", '
        f"nullable = {render_bool(field.nullable)}"
    )


def render_field(field: SchemaField) -> str:
    """
    Render one field on a single line (no trailing newline).

    Examples:
        >>> from structschema.core.schema import struct_field
        >>> render_field(struct_field("a", "integer"))
        'StructField(name = "a", type = "integer", nullable = true)'
    """
    return f"StructField({_field_body(field)})"


def render_struct_type(schema: StructType | BackendStructType) -> str:
    """
    Render a schema: a "StructType" header line, then one "|- ..." line per field in
    schema order. Every line ends with a newline.
    """
    lines = ["StructType\n"]
    lines.extend(f"|- {_field_body(f)}\n" for f in schema.fields)
    return "".join(lines)


def render(obj: StructType | BackendStructType | SchemaField) -> str:
    """
    Render any schema entity.

    Raises:
        ArgumentError: If obj is not a schema entity.
    """
    if isinstance(obj, (StructType, BackendStructType)):
        return render_struct_type(obj)
    if isinstance(obj, (StructField, BackendStructField)):
        return render_field(obj)
    raise ArgumentError(f"cannot print {type(obj).__name__}; expected a StructType or StructField")


def print_schema(obj: StructType | BackendStructType | SchemaField, file: TextIO | None = None) -> None:
    """Write ``render(obj)`` to file (stdout by default); fields get a trailing newline."""
    out = sys.stdout if file is None else file
    text = render(obj)
    if not text.endswith("\n"):
        text += "\n"
    out.write(text)
