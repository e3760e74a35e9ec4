"""Field mapping primitives for schema-declared payloads."""

from .field import Field, FieldProps

__all__ = [
    "Field",
    "FieldProps",
]
