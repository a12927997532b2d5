"""Validation of a standalone value against an annotation string."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from fieldguard.catalog import CROSS_FIELD_NAMES
from fieldguard.compiler.builder import compile_constraints
from fieldguard.compiler.constraints import Constraint
from fieldguard.compiler.crossfield import is_zero
from fieldguard.models.errors import AnnotationError, FieldError
from fieldguard.models.fields import FieldKind, TypeInfo
from fieldguard.parser.annotation import parse_tag
from fieldguard.parser.types import type_info_for_value
from fieldguard.registry import CustomValidatorRegistry
from fieldguard.validation.engine import apply_constraints, index_path

logger = logging.getLogger("fieldguard.validation")

VALUE_FIELD = "value"

# Names that only make sense on a record field
_RECORD_ONLY = frozenset({"default", "defaultUsingMethod", "extra_fields"})

_ANY = TypeInfo(FieldKind.ANY, Any)


@dataclass(frozen=True)
class ValuePlan:
    required: bool = False
    dive: bool = False
    constraints: tuple[Constraint, ...] = ()
    element_constraints: tuple[Constraint, ...] = ()
    key_constraints: tuple[Constraint, ...] = ()


@lru_cache(maxsize=512)
def compile_value(annotation: str, type_info: TypeInfo) -> ValuePlan:
    """Compile ``annotation`` for a value shaped like ``type_info``.

    A ``None`` value has no shape, so its annotation is parsed as if for a
    map (``dive`` and ``keys`` stay legal) and compiled against ``any``.
    """
    untyped = type_info.kind == FieldKind.ANY and type_info.nullable
    parse_kind = FieldKind.MAP if untyped else type_info.kind
    tag = parse_tag(
        annotation, parse_kind, label=VALUE_FIELD, aliases=CustomValidatorRegistry.aliases()
    )
    if tag is None:
        return ValuePlan()

    for name in tag.collection:
        if name in CROSS_FIELD_NAMES or name in _RECORD_ONLY:
            raise AnnotationError(f"{VALUE_FIELD}: '{name}' cannot be used on a standalone value")
    if tag.collection.get("required"):
        raise AnnotationError(f"{VALUE_FIELD}: constraint 'required' does not take a parameter")

    element_info = _ANY if untyped else type_info.element
    key_info = _ANY if untyped else type_info.key
    element_constraints: list[Constraint] = []
    key_constraints: list[Constraint] = []
    if tag.dive and element_info is not None:
        element_constraints = compile_constraints(
            tag.element, element_info, label=f"{VALUE_FIELD}[]", element=True
        )
        if key_info is not None:
            key_constraints = compile_constraints(
                tag.keys, key_info, label=f"{VALUE_FIELD}<key>", element=True
            )
    return ValuePlan(
        required=tag.required,
        dive=tag.dive,
        constraints=tuple(compile_constraints(tag.collection, type_info, label=VALUE_FIELD)),
        element_constraints=tuple(element_constraints),
        key_constraints=tuple(key_constraints),
    )


def check_value(value: Any, annotation: str) -> list[FieldError]:
    """Return every violation of ``annotation`` by ``value``.

    Errors name the field ``value``; elements reached through ``dive`` are
    reported as ``value[i]`` or ``value[key]``. A malformed annotation
    raises :class:`AnnotationError`.
    """
    plan = compile_value(annotation, type_info_for_value(value))
    if plan.required and is_zero(value):
        return [FieldError(field=VALUE_FIELD, message="is required", value=value, code="REQUIRED")]
    errors: list[FieldError] = []
    if value is None:
        return errors

    apply_constraints(plan.constraints, value, VALUE_FIELD, errors)
    if plan.dive:
        if isinstance(value, Mapping):
            for key, element in value.items():
                path = index_path(VALUE_FIELD, key)
                apply_constraints(plan.key_constraints, key, path, errors)
                apply_constraints(plan.element_constraints, element, path, errors)
        else:
            for i, element in enumerate(value):
                apply_constraints(plan.element_constraints, element, index_path(VALUE_FIELD, i), errors)
    if errors:
        logger.debug("Value check against %r produced %d errors", annotation, len(errors))
    return errors


CustomValidatorRegistry.add_listener(compile_value.cache_clear)
