from __future__ import annotations

from collections.abc import Sequence

import pytest

from structschema.core.errors import BackendError
from structschema.core.typing import FieldHandle, TypeHandle


class RecordingAdapter:
    """Minimal BackendAdapter keeping display strings verbatim and logging every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []
        self.fields: dict[int, tuple[str, int, bool]] = {}
        self.types: dict[int, tuple[str, tuple[int, ...]]] = {}
        self._next = 100

    def _new(self) -> int:
        self._next += 1
        return self._next

    def _lookup(self, table: dict, handle: int):
        if handle not in table:
            raise BackendError(f"stale handle {handle}")
        return table[handle]

    def create_struct_type(self, fields: Sequence[FieldHandle]) -> TypeHandle:
        h = self._new()
        self.types[h] = ("STRUCT", tuple(fields))
        return TypeHandle(h)

    def create_struct_field(self, name: str, type_descriptor: str, nullable: bool) -> FieldHandle:
        th = self._new()
        self.types[th] = (type_descriptor.upper(), ())
        fh = self._new()
        self.fields[fh] = (name, th, nullable)
        return FieldHandle(fh)

    def field_name(self, handle: FieldHandle) -> str:
        self.calls.append(("field_name", handle))
        return self._lookup(self.fields, handle)[0]

    def field_type(self, handle: FieldHandle) -> TypeHandle:
        self.calls.append(("field_type", handle))
        return TypeHandle(self._lookup(self.fields, handle)[1])

    def field_nullable(self, handle: FieldHandle) -> bool:
        self.calls.append(("field_nullable", handle))
        return self._lookup(self.fields, handle)[2]

    def type_fields(self, handle: TypeHandle) -> tuple[FieldHandle, ...]:
        self.calls.append(("type_fields", handle))
        return tuple(FieldHandle(h) for h in self._lookup(self.types, handle)[1])

    def type_to_string(self, handle: TypeHandle) -> str:
        self.calls.append(("type_to_string", handle))
        return self._lookup(self.types, handle)[0]

    def type_to_simple_string(self, handle: TypeHandle) -> str:
        self.calls.append(("type_to_simple_string", handle))
        return self._lookup(self.types, handle)[0].lower()


@pytest.fixture()
def adapter() -> RecordingAdapter:
    return RecordingAdapter()
