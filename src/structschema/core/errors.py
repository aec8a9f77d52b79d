"""
Core exception types raised by descriptor parsing, entity construction, and backend calls.

Provides typed exceptions for core-domain failures:
- ValidationError for descriptor grammar violations, unknown primitives, and map keys
  that are not string-like.
- ArgumentError for arguments of the wrong kind or arity (non-field passed where a
  field is required, non-str name/descriptor, non-bool nullable, empty field list).
- BackendError for failed adapter round trips (stale or foreign handles).

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Errors are raised at construction time and never swallowed; there is no retry
      policy because they describe malformed input, not transient failure.
    - BackendError propagates unmodified from the adapter boundary to the caller.

Examples:
    Catch a descriptor failure.

    >>> from structschema.core.errors import ValidationError
    >>> from structschema.core.grammar import check_type
    >>> try:
    ...     check_type("map<integer,double>")
    ... except ValidationError as e:
    ...     msg = str(e)
    >>> "string-like" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "ValidationError",
    "ArgumentError",
    "BackendError",
]


class ValidationError(ValueError):
    """Descriptor does not match the grammar, uses an unknown primitive, or has a non-string map key."""


class ArgumentError(TypeError):
    """Argument of the wrong kind or arity passed to a schema factory."""


class BackendError(RuntimeError):
    """A backend adapter call failed (e.g., the handle is stale or belongs to another adapter)."""
