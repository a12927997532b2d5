"""Structured error models and exception types."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class SourceSpan(BaseModel):
    """Points to exact location in YAML source for error reporting."""

    file: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


class FieldError(BaseModel):
    """A single field-level violation, addressed by its field path."""

    field: str
    message: str
    value: Any = None
    code: str | None = None
    span: SourceSpan | None = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class FieldguardError(Exception):
    """Base class for all errors raised by fieldguard."""


class AnnotationError(FieldguardError):
    """Raised when a validator is built from a defective annotation or option set.

    These are programming errors (bad grammar, unknown constraint, constraint
    on an incompatible type) and are raised at construction time, never while
    validating a value.
    """


class SchemaError(FieldguardError):
    """Raised when a schema cannot be generated for a type."""


class DecodeError(FieldguardError):
    """Raised when raw input cannot be decoded before field validation starts."""

    def __init__(self, message: str, span: SourceSpan | None = None) -> None:
        self.span = span
        super().__init__(message)


class ValidationError(FieldguardError):
    """One or more field violations found in a single value."""

    def __init__(self, errors: list[FieldError]) -> None:
        if not errors:
            raise ValueError("ValidationError requires at least one FieldError")
        self.errors = list(errors)
        super().__init__(self._summary())

    def _summary(self) -> str:
        first = self.errors[0]
        if len(self.errors) == 1:
            return f"{first.field}: {first.message}"
        return f"{first.field}: {first.message} (and {len(self.errors) - 1} more errors)"

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class ConstraintError(Exception):
    """A single constraint failure. Carries no field path; the caller attaches it."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


class FieldPathError(ConstraintError):
    """A cross-field reference could not be resolved on the current value."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__("FIELD_PATH", f"cannot resolve field path {path}: {reason}")
