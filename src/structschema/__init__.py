"""
structschema — column type descriptors, schema entities, and an engine adapter boundary.

## Layers
- structschema.core — grammar, type nodes, StructField/StructType, printer, errors (zero-IO).
- structschema.backend — BackendSettings and the Polars-backed adapter.
- structschema.cli — `structschema check` / `structschema show`.

## Import DAG discipline
- core depends only on stdlib and pydantic.
- backend depends on core and polars; cli depends on both.
"""

__version__ = "0.1.0"
