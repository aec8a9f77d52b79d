"""
structschema.backend — engine-side realization of schemas.

## Responsibilities
- BackendSettings — configuration (env > TOML > defaults).
- PolarsBackend — BackendAdapter over Polars dtypes with a handle registry.
- to_backend / materialize — move schemas across the adapter boundary.

## Import DAG discipline
- Depends only on stdlib, polars, and structschema.core.
- MUST NOT import structschema.cli.

## Examples
```python
from structschema.core import struct_field, struct_type, print_schema
from structschema.backend import PolarsBackend, to_backend

backend = PolarsBackend()
hydrated = to_backend(struct_type(struct_field("a", "numeric")), backend)
print_schema(hydrated)
# StructType
# |- name = "a", type = "Float64", nullable = true
backend.empty_frame(hydrated.handle)  # shape: (0, 1)
```
"""

from __future__ import annotations

from .config import BackendSettings
from .convert import materialize, to_backend
from .polars_backend import PolarsBackend, canonicalize

__all__ = [
    "BackendSettings",
    "PolarsBackend",
    "canonicalize",
    "materialize",
    "to_backend",
]
