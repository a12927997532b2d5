"""Recursive validation engine: walks a value against its compiled RecordPlan."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from fieldguard.compiler.constraints import Constraint
from fieldguard.compiler.crossfield import is_zero
from fieldguard.compiler.plan import FieldPlan, RecordPlan
from fieldguard.models.errors import ConstraintError, FieldError
from fieldguard.models.fields import FieldKind, TypeInfo

logger = logging.getLogger("fieldguard.validation")

ROOT = "root"


def join_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def index_path(path: str, index: Any) -> str:
    return f"{path}[{index}]"


def apply_constraints(
    constraints: Iterable[Constraint], value: Any, path: str, errors: list[FieldError]
) -> None:
    """Run each constraint on ``value``, appending one FieldError per failure."""
    for constraint in constraints:
        try:
            constraint.validate(value)
        except ConstraintError as exc:
            errors.append(FieldError(field=path, message=exc.message, value=value, code=exc.code))


class RecordValidator:
    """Applies a RecordPlan to values, accumulating every violation.

    Nothing short-circuits: all fields, elements and nested records are
    visited and every failure becomes one :class:`FieldError` in discovery
    order. The validator keeps no per-call state and may be shared between
    threads.
    """

    def __init__(self, plan: RecordPlan, *, strict_missing_fields: bool = True) -> None:
        self.plan = plan
        self.strict_missing_fields = strict_missing_fields

    def validate(self, obj: Any) -> list[FieldError]:
        root_error = self._root_error(obj)
        if root_error is not None:
            return [root_error]
        errors: list[FieldError] = []
        self._validate_record(obj, self.plan, "", errors)
        if errors:
            logger.debug("Validating %s produced %d errors", self.plan.name, len(errors))
        return errors

    def validate_partial(self, obj: Any, fields: Iterable[str]) -> list[FieldError]:
        """Validate only the named top-level fields (wire or attribute names).

        Selected ``required`` fields are checked against their zero value and
        record-level validators of the root do not run. Nested records of a
        selected field are validated in full.
        """
        return self._validate_selected(obj, self._select(fields))

    def validate_except(self, obj: Any, fields: Iterable[str]) -> list[FieldError]:
        """Like :meth:`validate_partial` for every top-level field except ``fields``."""
        skipped = self._select(fields)
        return self._validate_selected(
            obj, {fp.name for fp in self.plan.fields if fp.name not in skipped}
        )

    def _root_error(self, obj: Any) -> FieldError | None:
        if obj is None:
            return FieldError(field=ROOT, message="cannot validate None", code="NIL_VALUE")
        if not isinstance(obj, self.plan.record):
            return FieldError(
                field=ROOT,
                message=f"expected {self.plan.name}, got {type(obj).__name__}",
                value=obj,
                code="INVALID_TYPE",
            )
        return None

    def _select(self, names: Iterable[str]) -> set[str]:
        lookup = {fp.name: fp.name for fp in self.plan.fields}
        lookup.update({fp.wire_name: fp.name for fp in self.plan.fields})
        if isinstance(names, str):
            names = [names]
        unknown = [name for name in names if name not in lookup]
        if unknown:
            raise ValueError(f"{self.plan.name} has no field(s): {', '.join(unknown)}")
        return {lookup[name] for name in names}

    def _validate_selected(self, obj: Any, selected: set[str]) -> list[FieldError]:
        root_error = self._root_error(obj)
        if root_error is not None:
            return [root_error]
        errors: list[FieldError] = []
        for field_plan in self.plan.fields:
            if field_plan.name in selected:
                self._validate_field(obj, field_plan, "", errors, zero_required=True)
        return errors

    # -- records ----------------------------------------------------------------

    def _validate_record(
        self, obj: Any, plan: RecordPlan, path: str, errors: list[FieldError]
    ) -> None:
        for field_plan in plan.fields:
            self._validate_field(obj, field_plan, path, errors)
        self._run_struct_validators(obj, plan, path, errors)

    def _validate_field(
        self,
        obj: Any,
        field_plan: FieldPlan,
        path: str,
        errors: list[FieldError],
        *,
        zero_required: bool = False,
    ) -> None:
        value = getattr(obj, field_plan.name)
        field_path = join_path(path, field_plan.name)

        # Nested records have no presence information left; fall back to zero
        nested_required = bool(path) and self.strict_missing_fields
        if field_plan.required and (zero_required or nested_required) and is_zero(value):
            errors.append(
                FieldError(field=field_path, message="is required", value=value, code="REQUIRED")
            )
            return

        if value is not None:
            self._apply(field_plan.constraints, value, field_path, errors)

        for constraint in field_plan.cross_field:
            try:
                constraint.validate(value, obj)
            except ConstraintError as exc:
                errors.append(
                    FieldError(field=field_path, message=exc.message, value=value, code=exc.code)
                )

        if value is None:
            return

        type_info = field_plan.type_info
        if type_info.kind == FieldKind.SEQUENCE and isinstance(value, (list, tuple, set, frozenset)):
            for i, element in enumerate(value):
                element_path = index_path(field_path, i)
                if field_plan.dive:
                    self._apply(field_plan.element_constraints, element, element_path, errors)
                self._descend(element, type_info.element, element_path, errors)
        elif type_info.kind == FieldKind.MAP and isinstance(value, dict):
            for key, element in value.items():
                element_path = index_path(field_path, key)
                if field_plan.dive:
                    self._apply(field_plan.key_constraints, key, element_path, errors)
                    self._apply(field_plan.element_constraints, element, element_path, errors)
                self._descend(element, type_info.element, element_path, errors)
        else:
            self._descend(value, type_info, field_path, errors)

    def _descend(
        self, value: Any, type_info: TypeInfo | None, path: str, errors: list[FieldError]
    ) -> None:
        """Structural descent into records, independent of ``dive``."""
        if value is None or type_info is None:
            return
        kind = type_info.kind
        if kind == FieldKind.RECORD and type_info.record is not None:
            if isinstance(value, type_info.record):
                self._validate_record(value, self.plan.plan_for(type_info.record), path, errors)
        elif kind == FieldKind.SEQUENCE and isinstance(value, (list, tuple, set, frozenset)):
            for i, element in enumerate(value):
                self._descend(element, type_info.element, index_path(path, i), errors)
        elif kind == FieldKind.MAP and isinstance(value, dict):
            for key, element in value.items():
                self._descend(element, type_info.element, index_path(path, key), errors)

    # -- helpers ------------------------------------------------------------------

    _apply = staticmethod(apply_constraints)

    @staticmethod
    def _run_struct_validators(
        obj: Any, plan: RecordPlan, path: str, errors: list[FieldError]
    ) -> None:
        for func in plan.struct_validators:
            try:
                reported = func(obj)
            except ConstraintError as exc:
                errors.append(FieldError(field=path or ROOT, message=exc.message, code=exc.code))
                continue
            except ValueError as exc:
                errors.append(FieldError(field=path or ROOT, message=str(exc), code="CUSTOM"))
                continue
            for error in reported or ():
                target = join_path(path, error.field) if error.field else (path or ROOT)
                errors.append(error.model_copy(update={"field": target}))
