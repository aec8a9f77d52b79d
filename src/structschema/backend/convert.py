"""
Conversions between local schema values and backend-hydrated schemas.

- to_backend: push a local StructType through any BackendAdapter and get back a
  BackendStructType whose accessors query the adapter.
- materialize: pull a hydrated schema back into local, backend-free values.

Notes
- Local fields are sent as descriptor text rendered from their TypeNode, so aliases
  reach the adapter exactly as the user wrote them.
- materialize re-parses ``type_to_simple_string`` and therefore requires an adapter
  whose simple strings follow the descriptor grammar (PolarsBackend does).
"""

from __future__ import annotations

import logging

from structschema.core.adapter import BackendAdapter
from structschema.core.printer import render_type
from structschema.core.schema import (
    BackendStructType,
    StructField,
    StructType,
    ensure_unique_field_names,
)
from structschema.core.typing import FieldHandle

__all__ = [
    "to_backend",
    "materialize",
]

logger = logging.getLogger(__name__)


def to_backend(
    schema: StructType,
    adapter: BackendAdapter,
    *,
    unique_field_names: bool = False,
) -> BackendStructType:
    """
    Create engine-side field and struct-type objects for a local schema.

    Args:
        schema (StructType): Local schema.
        adapter (BackendAdapter): Target backend.
        unique_field_names (bool): Run ensure_unique_field_names first.

    Returns:
        BackendStructType: Hydrated schema bound to adapter.

    Raises:
        ValidationError: If unique_field_names is set and names repeat.
        BackendError: Propagated from the adapter.
    """
    if unique_field_names:
        ensure_unique_field_names(schema)
    handles: list[FieldHandle] = []
    for f in schema.fields:
        if isinstance(f, StructField):
            handles.append(adapter.create_struct_field(f.name, render_type(f.data_type), f.nullable))
        elif f.adapter is adapter:
            handles.append(f.handle)
        else:
            handles.append(adapter.create_struct_field(f.name, f.type_simple_string, f.nullable))
    type_handle = adapter.create_struct_type(handles)
    logger.info("created backend struct type %s with %d fields", type_handle, len(handles))
    return BackendStructType.from_handle(type_handle, adapter)


def materialize(backend_type: BackendStructType) -> StructType:
    """
    Copy a hydrated schema into local StructField values.

    Raises:
        ValidationError: If a field's simple string is not a valid descriptor.
        BackendError: Propagated from the adapter.
    """
    return StructType.from_fields(
        *(
            StructField.from_descriptor(f.name, f.type_simple_string, f.nullable)
            for f in backend_type.fields
        )
    )
