"""
Lightweight typing aliases used across core entities and adapters.

Provides NewTypes for the opaque backend handles that hydrated entities carry.
This module contains no runtime logic and is zero-IO.

Notes:
    - Handles are lookup keys owned by a backend adapter; entities never compute
      anything from them locally.
    - Keep the surface small and stable to avoid churn in dependents.

Examples:
    >>> from structschema.core.typing import FieldHandle, TypeHandle
    >>> def describe(h: FieldHandle) -> str:
    ...     return f"field#{int(h)}"
    >>> describe(FieldHandle(3))
    'field#3'
"""

from __future__ import annotations

from typing import NewType

__all__ = [
    "FieldHandle",
    "TypeHandle",
]

# Backend-side struct field object.
FieldHandle = NewType("FieldHandle", int)
# Backend-side data type object (struct types included).
TypeHandle = NewType("TypeHandle", int)
