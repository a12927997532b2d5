"""Data models shared by the parser, compiler and validation engine."""

from fieldguard.models.errors import (
    AnnotationError,
    ConstraintError,
    DecodeError,
    FieldError,
    FieldguardError,
    FieldPathError,
    SchemaError,
    SourceSpan,
    ValidationError,
)
from fieldguard.models.fields import (
    ExtraFields,
    FieldInfo,
    FieldKind,
    ParsedTag,
    Presence,
    TypeInfo,
)

__all__ = [
    "AnnotationError",
    "ConstraintError",
    "DecodeError",
    "ExtraFields",
    "FieldError",
    "FieldInfo",
    "FieldKind",
    "FieldPathError",
    "FieldguardError",
    "ParsedTag",
    "Presence",
    "SchemaError",
    "SourceSpan",
    "TypeInfo",
    "ValidationError",
]
