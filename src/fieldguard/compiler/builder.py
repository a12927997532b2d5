"""Constraint compiler: turns parsed annotation sections into constraint objects."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fieldguard.catalog import (
    ANY_OF_SEPARATOR,
    CROSS_FIELD_NAMES,
    MARKERS,
    PRESENCE_NAMES,
    Param,
    lookup,
)
from fieldguard.compiler.constraints import (
    BUILTIN_CONSTRAINTS,
    AnyOfConstraint,
    Constraint,
    CustomConstraint,
)
from fieldguard.compiler.crossfield import (
    COMPARISONS,
    CONDITIONALS,
    VALUE_CONDITIONALS,
    CrossFieldConstraint,
    build_accessor,
    is_zero,
    split_condition,
)
from fieldguard.models.errors import AnnotationError
from fieldguard.models.fields import FieldInfo, FieldKind, TypeInfo
from fieldguard.registry import CustomValidatorRegistry


class RequiredElementConstraint(Constraint):
    """``required`` after ``dive``: each element / key must be non-zero."""

    name = "required"
    code = "REQUIRED"

    def validate(self, value: Any) -> None:
        self.check(value)

    def check(self, value: Any) -> None:
        if is_zero(value):
            self.fail("is required")


def _check_param(
    name: str, param: str, expects_param: bool, label: str, hint: str = ""
) -> None:
    if expects_param and param == "":
        suffix = f" ({hint})" if hint else ""
        raise AnnotationError(f"{label}: constraint '{name}' requires a parameter{suffix}")
    if not expects_param and param != "":
        raise AnnotationError(f"{label}: constraint '{name}' does not take a parameter")


def compile_constraints(
    section: Mapping[str, str],
    type_info: TypeInfo,
    *,
    label: str,
    element: bool = False,
) -> list[Constraint]:
    """Compile one annotation section for a value of ``type_info``.

    Presence names and cross-field names are skipped on the field section
    (they are handled by the decoder and :func:`compile_cross_field`). In an
    element or key section (``element=True``) ``required`` checks each
    element and the other presence / cross-field names are rejected.
    """
    kind = type_info.kind
    compiled: list[Constraint] = []
    for name, param in section.items():
        if ANY_OF_SEPARATOR in name:
            compiled.append(_compile_any_of(name, type_info, label, element))
            continue
        entry = lookup(name)
        if entry is None:
            func = CustomValidatorRegistry.lookup(name)
            if func is None:
                raise AnnotationError(f"{label}: unknown constraint '{name}'")
            compiled.append(CustomConstraint(name, func, param, kind))
            continue

        if name in PRESENCE_NAMES or name in CROSS_FIELD_NAMES:
            if not element:
                continue
            if name == "required":
                _check_param(name, param, False, label)
                compiled.append(RequiredElementConstraint("", kind))
                continue
            raise AnnotationError(
                f"{label}: constraint '{name}' cannot be used on collection elements or keys"
            )

        if not entry.supports(kind):
            raise AnnotationError(f"constraint '{name}' cannot be applied to {kind} field '{label}'")
        _check_param(name, param, entry.param == Param.REQUIRED, label, entry.description)
        try:
            compiled.append(BUILTIN_CONSTRAINTS[name](param, kind))
        except ValueError as exc:
            raise AnnotationError(f"{label}: invalid parameter for '{name}': {exc}") from exc
    return compiled


def _compile_any_of(
    expression: str, type_info: TypeInfo, label: str, element: bool
) -> AnyOfConstraint:
    alternatives: list[Constraint] = []
    for name in expression.split(ANY_OF_SEPARATOR):
        if name in MARKERS or name in PRESENCE_NAMES or name in CROSS_FIELD_NAMES:
            raise AnnotationError(
                f"{label}: '{name}' cannot be used as an alternative in '{expression}'"
            )
        alternatives.extend(compile_constraints({name: ""}, type_info, label=label, element=element))
    return AnyOfConstraint(expression, alternatives, type_info.kind)


def compile_cross_field(
    section: Mapping[str, str],
    fields: Sequence[FieldInfo],
    field: FieldInfo,
    *,
    owner: str,
) -> list[CrossFieldConstraint]:
    """Compile the cross-field names of ``field``'s section against its record."""
    label = f"{owner}.{field.name}"
    kind = field.type_info.kind
    compiled: list[CrossFieldConstraint] = []
    for name, param in section.items():
        if name not in CROSS_FIELD_NAMES:
            continue
        entry = lookup(name)
        assert entry is not None
        if not entry.supports(kind):
            raise AnnotationError(f"constraint '{name}' cannot be applied to {kind} field '{label}'")
        _check_param(name, param, True, label, entry.description)

        compare_value: str | None = None
        target = param.strip()
        if name in VALUE_CONDITIONALS:
            try:
                target, compare_value = split_condition(param)
            except ValueError as exc:
                raise AnnotationError(f"{label}: invalid parameter for '{name}': {exc}") from exc

        try:
            accessor = build_accessor(target, fields, owner)
        except ValueError as exc:
            raise AnnotationError(f"{label}: {name} references {exc}") from exc

        if name in COMPARISONS:
            if accessor.attrs == (field.name,):
                raise AnnotationError(f"{label}: cannot reference itself in {name} constraint")
            comparison = COMPARISONS[name]
            if comparison.ordered and not _orderable(kind, accessor.type_info.kind):
                raise AnnotationError(
                    f"{label}: cannot compare {kind} field with {accessor.type_info.kind} "
                    f"field '{target}' in {name} constraint"
                )
            compiled.append(comparison(param, accessor))
        else:
            compiled.append(CONDITIONALS[name](param, accessor, compare_value))
    return compiled


def _orderable(a: FieldKind, b: FieldKind) -> bool:
    if FieldKind.ANY in (a, b):
        return True
    if a.is_numeric and b.is_numeric:
        return True
    return a == b == FieldKind.STRING
