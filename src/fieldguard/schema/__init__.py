"""JSON Schema generation."""

from fieldguard.schema.generator import SCHEMA_DIALECT, SchemaGenerator, SchemaMode

__all__ = [
    "SCHEMA_DIALECT",
    "SchemaGenerator",
    "SchemaMode",
]
