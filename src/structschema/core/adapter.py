"""
Capability interface for the engine-side schema backend.

Hydrated entities (structschema.core.schema.BackendStructField/BackendStructType) hold a
handle plus an adapter implementing this protocol; every accessor is one synchronous
call through it. All remote/mutable state lives behind the adapter.

Notes:
    - Implementations raise structschema.core.errors.BackendError for stale or foreign
      handles; entities propagate it unmodified.
    - Canonicalizing primitive aliases to engine type names is the adapter's job.
    - No timeout or cancellation is imposed by the core.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .typing import FieldHandle, TypeHandle

__all__ = ["BackendAdapter"]


@runtime_checkable
class BackendAdapter(Protocol):
    """Operations the core consumes from (and exposes for) a schema backend."""

    def create_struct_type(self, fields: Sequence[FieldHandle]) -> TypeHandle: ...

    def create_struct_field(
        self, name: str, type_descriptor: str, nullable: bool
    ) -> FieldHandle: ...

    def field_name(self, handle: FieldHandle) -> str: ...

    def field_type(self, handle: FieldHandle) -> TypeHandle: ...

    def field_nullable(self, handle: FieldHandle) -> bool: ...

    def type_fields(self, handle: TypeHandle) -> tuple[FieldHandle, ...]: ...

    def type_to_string(self, handle: TypeHandle) -> str:
        """Full engine display of a type."""
        ...

    def type_to_simple_string(self, handle: TypeHandle) -> str:
        """Abbreviated display of a type."""
        ...
