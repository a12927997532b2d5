"""Compiled validation plans, built once per record type."""

from __future__ import annotations

import dataclasses
import inspect
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, get_type_hints

from fieldguard.compiler.builder import compile_constraints, compile_cross_field
from fieldguard.compiler.constraints import Constraint
from fieldguard.compiler.crossfield import CrossFieldConstraint
from fieldguard.models.errors import AnnotationError
from fieldguard.models.fields import ExtraFields, FieldInfo, FieldKind, ParsedTag, TypeInfo
from fieldguard.parser.types import inspect_record, resolve_type
from fieldguard.registry import CustomValidatorRegistry, StructFunc

logger = logging.getLogger("fieldguard.compiler")


@dataclass(frozen=True)
class StaticDefault:
    """A ``default=`` literal, already converted to the field's type."""

    value: Any


@dataclass(frozen=True)
class MethodDefault:
    """A ``defaultUsingMethod=`` hook returning ``(value, error)``."""

    method: str
    func: Any

    def produce(self) -> tuple[Any, Any]:
        """Call the hook; a malformed return value is reported as its error."""
        result = self.func()
        if not isinstance(result, tuple) or len(result) != 2:
            return None, (
                f"defaultUsingMethod '{self.method}' must return a (value, error) tuple, "
                f"got {type(result).__name__}"
            )
        return result


@dataclass(frozen=True)
class FieldPlan:
    info: FieldInfo
    constraints: tuple[Constraint, ...] = ()
    cross_field: tuple[CrossFieldConstraint, ...] = ()
    element_constraints: tuple[Constraint, ...] = ()
    key_constraints: tuple[Constraint, ...] = ()
    required: bool = False
    default: StaticDefault | MethodDefault | None = None
    extras: bool = False

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def wire_name(self) -> str:
        return self.info.wire_name

    @property
    def type_info(self) -> TypeInfo:
        return self.info.type_info

    @property
    def tag(self) -> ParsedTag | None:
        return self.info.tag

    @property
    def dive(self) -> bool:
        return self.info.tag is not None and self.info.tag.dive


@dataclass
class RecordPlan:
    """Everything the engine, decoder and schema generator need for one record type.

    ``fields`` is filled in right after the plan is registered, so recursive
    types resolve to the same (shared) plan object.
    """

    record: type
    fields: tuple[FieldPlan, ...] = ()
    struct_validators: tuple[StructFunc, ...] = ()
    nested: dict[type, RecordPlan] = field(default_factory=dict, repr=False)

    @property
    def name(self) -> str:
        return self.record.__name__

    @property
    def extras_field(self) -> FieldPlan | None:
        """The field collecting undeclared input keys, if the record has one."""
        return next((fp for fp in self.fields if fp.extras), None)

    def plan_for(self, record: type) -> RecordPlan:
        if record is self.record:
            return self
        return self.nested[record]


def zero_value(type_info: TypeInfo) -> Any:
    """The value a field takes when nothing was provided for it."""
    if type_info.nullable:
        return None
    kind = type_info.kind
    if kind == FieldKind.STRING:
        return ""
    if kind == FieldKind.INTEGER:
        return 0
    if kind == FieldKind.NUMBER:
        return 0.0
    if kind == FieldKind.BOOLEAN:
        return False
    if kind == FieldKind.SEQUENCE:
        return (type_info.container or list)()
    if kind == FieldKind.MAP:
        return {}
    if kind == FieldKind.RECORD and type_info.record is not None:
        return zero_record(type_info.record)
    return None


def zero_record(record: type) -> Any:
    hints = get_type_hints(record, include_extras=True)
    kwargs = {}
    for f in dataclasses.fields(record):
        if not f.init:
            continue
        kwargs[f.name] = zero_value(resolve_type(hints.get(f.name, Any), f.name))
    return record(**kwargs)


def parse_default(raw: str, type_info: TypeInfo, label: str) -> Any:
    kind = type_info.kind
    try:
        if kind == FieldKind.STRING:
            return raw
        if kind == FieldKind.INTEGER:
            return int(raw)
        if kind == FieldKind.NUMBER:
            return float(raw)
        if kind == FieldKind.BOOLEAN:
            if raw not in ("true", "false"):
                raise ValueError(f"'{raw}' is not true/false")
            return raw == "true"
    except ValueError as exc:
        raise AnnotationError(f"{label}: invalid default '{raw}' for {kind} field: {exc}") from exc
    raise AnnotationError(f"{label}: 'default' is not supported on {kind} fields")


def _resolve_method(record: type, method: str, label: str) -> MethodDefault:
    try:
        static = inspect.getattr_static(record, method)
    except AttributeError:
        raise AnnotationError(
            f"{label}: defaultUsingMethod '{method}' does not exist on {record.__name__}"
        ) from None
    if not isinstance(static, (classmethod, staticmethod)):
        raise AnnotationError(
            f"{label}: defaultUsingMethod '{method}' must be a classmethod or staticmethod"
        )
    func = getattr(record, method)
    if not callable(func):
        raise AnnotationError(f"{label}: defaultUsingMethod '{method}' is not callable")
    return MethodDefault(method, func)


class PlanBuilder:
    """Builds (and memoises) RecordPlans for a record type graph."""

    def __init__(
        self,
        *,
        tag_name: str = "validate",
        wire_name_key: str = "json",
        strict_missing_fields: bool = True,
        extra_fields: ExtraFields = ExtraFields.IGNORE,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self.tag_name = tag_name
        self.wire_name_key = wire_name_key
        self.strict_missing_fields = strict_missing_fields
        self.extra_fields = ExtraFields(extra_fields)
        self.aliases = dict(aliases) if aliases is not None else CustomValidatorRegistry.aliases()
        self._plans: dict[type, RecordPlan] = {}

    def build(self, record: type) -> RecordPlan:
        root = self._build(record)
        if self.extra_fields == ExtraFields.ALLOW and root.extras_field is None:
            raise AnnotationError(
                f"{record.__name__}: extra_fields=allow requires a dict[str, Any] field "
                f"annotated with 'extra_fields'"
            )
        root.nested = {cls: plan for cls, plan in self._plans.items() if cls is not record}
        for plan in self._plans.values():
            if plan is not root:
                plan.nested = root.nested | {record: root}
        logger.debug("Compiled plan for %s (%d record types)", record.__name__, len(self._plans))
        return root

    def _build(self, record: type) -> RecordPlan:
        existing = self._plans.get(record)
        if existing is not None:
            return existing
        plan = RecordPlan(record)
        self._plans[record] = plan

        infos = inspect_record(
            record,
            tag_name=self.tag_name,
            wire_name_key=self.wire_name_key,
            aliases=self.aliases,
        )
        plan.fields = tuple(self._build_field(record, infos, info) for info in infos)
        if sum(fp.extras for fp in plan.fields) > 1:
            raise AnnotationError(f"{record.__name__}: only one field may be 'extra_fields'")
        plan.struct_validators = CustomValidatorRegistry.struct_validators(record)

        for info in infos:
            for nested in _records_in(info.type_info):
                self._build(nested)
        return plan

    def _build_field(self, record: type, infos: list[FieldInfo], info: FieldInfo) -> FieldPlan:
        tag = info.tag
        if tag is None:
            return FieldPlan(info)

        label = f"{record.__name__}.{info.name}"
        type_info = info.type_info
        if tag.extra_fields:
            return _extras_plan(info, tag, label)
        constraints = compile_constraints(tag.collection, type_info, label=label)
        cross_field = compile_cross_field(tag.collection, infos, info, owner=record.__name__)

        element_constraints: list[Constraint] = []
        key_constraints: list[Constraint] = []
        if tag.dive:
            assert type_info.element is not None
            element_constraints = compile_constraints(
                tag.element, type_info.element, label=f"{label}[]", element=True
            )
            if type_info.key is not None:
                key_constraints = compile_constraints(
                    tag.keys, type_info.key, label=f"{label}<key>", element=True
                )

        default: StaticDefault | MethodDefault | None = None
        if tag.default is not None or tag.default_method is not None:
            if not self.strict_missing_fields:
                raise AnnotationError(
                    f"{label}: 'default'/'defaultUsingMethod' require strict missing-field handling"
                )
            if tag.required:
                raise AnnotationError(f"{label}: 'required' cannot be combined with a default")
            if tag.default is not None and tag.default_method is not None:
                raise AnnotationError(
                    f"{label}: 'default' and 'defaultUsingMethod' are mutually exclusive"
                )
            if tag.default is not None:
                default = StaticDefault(parse_default(tag.default, type_info, label))
            else:
                assert tag.default_method is not None
                default = _resolve_method(record, tag.default_method, label)

        if "required" in tag.collection and tag.collection["required"]:
            raise AnnotationError(f"{label}: constraint 'required' does not take a parameter")

        return FieldPlan(
            info,
            constraints=tuple(constraints),
            cross_field=tuple(cross_field),
            element_constraints=tuple(element_constraints),
            key_constraints=tuple(key_constraints),
            required=tag.required,
            default=default,
        )


def _extras_plan(info: FieldInfo, tag: ParsedTag, label: str) -> FieldPlan:
    key = info.type_info.key
    if info.type_info.kind != FieldKind.MAP or key is None or key.kind != FieldKind.STRING:
        raise AnnotationError(f"{label}: 'extra_fields' requires a dict[str, ...] field")
    if tag.collection["extra_fields"]:
        raise AnnotationError(f"{label}: constraint 'extra_fields' does not take a parameter")
    if len(tag.collection) > 1 or tag.dive:
        raise AnnotationError(f"{label}: 'extra_fields' cannot be combined with other constraints")
    return FieldPlan(info, extras=True)


def _records_in(type_info: TypeInfo | None) -> Iterator[type]:
    while type_info is not None:
        if type_info.kind == FieldKind.RECORD and type_info.record is not None:
            yield type_info.record
            return
        type_info = type_info.element


def compile_record(record: type, **options: Any) -> RecordPlan:
    """Build the plan for ``record``; raises AnnotationError for defective annotations."""
    return PlanBuilder(**options).build(record)
