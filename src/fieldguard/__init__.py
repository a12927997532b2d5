"""fieldguard: declarative constraint validation and JSON Schema for dataclasses.

Annotate dataclass fields with a constraint string and validate values,
decode JSON / YAML with presence-aware defaults, or derive a JSON Schema::

    @dataclass
    class User:
        name: str = field(metadata={"validate": "required,min=2"})
        email: str = field(default="", metadata={"validate": "email"})

    user = fieldguard.unmarshal(User, '{"name": "Ada"}')
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

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
from fieldguard.models.fields import ExtraFields
from fieldguard.registry import CustomFunc, CustomValidatorRegistry, RegistrationError, StructFunc
from fieldguard.schema.generator import SchemaMode
from fieldguard.service.validator import (
    Validator,
    ValidatorOptions,
    clear_validator_cache,
    get_validator,
)
from fieldguard.validation.value import check_value

__version__ = "0.4.0"

T = TypeVar("T")


def validate(obj: Any) -> None:
    """Validate a record instance, raising :class:`ValidationError` on failure."""
    if obj is None:
        raise ValidationError([FieldError(field="root", message="cannot validate None", code="NIL_VALUE")])
    get_validator(type(obj)).validate(obj)


def collect_errors(obj: Any) -> list[FieldError]:
    if obj is None:
        return [FieldError(field="root", message="cannot validate None", code="NIL_VALUE")]
    return get_validator(type(obj)).collect_errors(obj)


def validate_partial(obj: Any, *fields: str) -> None:
    """Validate only the named top-level fields of a record instance."""
    if obj is None:
        raise ValidationError([FieldError(field="root", message="cannot validate None", code="NIL_VALUE")])
    get_validator(type(obj)).validate_partial(obj, *fields)


def validate_except(obj: Any, *fields: str) -> None:
    if obj is None:
        raise ValidationError([FieldError(field="root", message="cannot validate None", code="NIL_VALUE")])
    get_validator(type(obj)).validate_except(obj, *fields)


def validate_var(value: Any, annotation: str) -> None:
    """Validate a standalone value, raising :class:`ValidationError` on failure.

    Errors are reported on the field ``value``::

        fieldguard.validate_var("ada@example", "required,email")
    """
    errors = check_value(value, annotation)
    if errors:
        raise ValidationError(errors)


def unmarshal(record: type[T], data: str | bytes) -> T:
    """Decode JSON text into a validated ``record`` instance."""
    return get_validator(record).unmarshal(data)


def from_dict(record: type[T], data: Any) -> T:
    return get_validator(record).from_dict(data)


def from_yaml(record: type[T], text: str, filename: str = "<string>") -> T:
    return get_validator(record).from_yaml(text, filename)


def from_yaml_file(record: type[T], path: Path) -> T:
    return get_validator(record).from_yaml_file(path)


def to_dict(obj: Any) -> dict[str, Any]:
    """Validate ``obj`` and dump it keyed by wire names."""
    return get_validator(type(obj)).to_dict(obj)


def schema(record: type, mode: SchemaMode | str = SchemaMode.INLINE) -> dict[str, Any]:
    return get_validator(record).schema(mode)


def schema_json(record: type, mode: SchemaMode | str = SchemaMode.INLINE) -> str:
    return get_validator(record).schema_json(mode)


def register_validation(name: str, func: CustomFunc) -> None:
    """Register a custom constraint ``func(value, param)`` under ``name``."""
    CustomValidatorRegistry.register(name, func)


def register_alias(name: str, expansion: str) -> None:
    CustomValidatorRegistry.register_alias(name, expansion)


def register_struct_validation(record: type, func: StructFunc) -> None:
    CustomValidatorRegistry.register_struct_validator(record, func)


__all__ = [
    "AnnotationError",
    "ConstraintError",
    "CustomValidatorRegistry",
    "DecodeError",
    "ExtraFields",
    "FieldError",
    "FieldPathError",
    "FieldguardError",
    "RegistrationError",
    "SchemaError",
    "SchemaMode",
    "SourceSpan",
    "ValidationError",
    "Validator",
    "ValidatorOptions",
    "check_value",
    "clear_validator_cache",
    "collect_errors",
    "from_dict",
    "from_yaml",
    "from_yaml_file",
    "get_validator",
    "register_alias",
    "register_struct_validation",
    "register_validation",
    "schema",
    "schema_json",
    "to_dict",
    "unmarshal",
    "validate",
    "validate_except",
    "validate_partial",
    "validate_var",
]
