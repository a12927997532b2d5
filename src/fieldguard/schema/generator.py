"""JSON Schema (draft 2020-12 subset) generation from compiled record plans."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fieldguard.compiler.constraints import Constraint
from fieldguard.compiler.plan import FieldPlan, RecordPlan, StaticDefault
from fieldguard.models.errors import SchemaError
from fieldguard.models.fields import FieldKind, TypeInfo

logger = logging.getLogger("fieldguard.schema")

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

_SCALAR_TYPES = {
    FieldKind.STRING: "string",
    FieldKind.INTEGER: "integer",
    FieldKind.NUMBER: "number",
    FieldKind.BOOLEAN: "boolean",
}


class SchemaMode(StrEnum):
    INLINE = "inline"
    REFERENCED = "referenced"


@dataclass
class _Context:
    mode: SchemaMode
    root: type
    defs: dict[str, dict[str, Any]] = field(default_factory=dict)
    names: dict[type, str] = field(default_factory=dict)
    stack: list[type] = field(default_factory=list)


def merge_keywords(schema: dict[str, Any], keywords: dict[str, Any]) -> None:
    """Add ``keywords`` to ``schema``; clashing keywords go under ``allOf``."""
    for key, value in keywords.items():
        if key not in schema:
            schema[key] = value
        elif schema[key] != value:
            schema.setdefault("allOf", []).append({key: value})


class SchemaGenerator:
    """Derives a JSON Schema document from a :class:`RecordPlan`.

    The root record is always expanded inline. In ``inline`` mode nested
    records are expanded in place (recursive types raise
    :class:`SchemaError`); in ``referenced`` mode each nested record is
    emitted once under ``$defs`` and referenced with ``$ref``. With
    ``forbid_extra_fields`` every record schema closes its property set.
    """

    def __init__(self, plan: RecordPlan, *, forbid_extra_fields: bool = False) -> None:
        self.plan = plan
        self.forbid_extra_fields = forbid_extra_fields

    def generate(self, mode: SchemaMode | str = SchemaMode.INLINE) -> dict[str, Any]:
        mode = SchemaMode(mode)
        ctx = _Context(mode=mode, root=self.plan.record)
        ctx.stack.append(self.plan.record)
        body = self._record_schema(self.plan, ctx)
        schema: dict[str, Any] = {"$schema": SCHEMA_DIALECT, "title": self.plan.name, **body}
        if ctx.defs:
            schema["$defs"] = ctx.defs
        logger.debug("Generated %s schema for %s (%d defs)", mode, self.plan.name, len(ctx.defs))
        return schema

    # -- records ----------------------------------------------------------------

    def _record_schema(self, plan: RecordPlan, ctx: _Context) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        required: list[str] = []
        for field_plan in plan.fields:
            if field_plan.extras:
                continue
            properties[field_plan.wire_name] = self._field_schema(field_plan, ctx)
            if field_plan.required:
                required.append(field_plan.wire_name)
        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        if self.forbid_extra_fields:
            schema["additionalProperties"] = False
        return schema

    def _record_ref(self, record: type, ctx: _Context) -> dict[str, Any]:
        if ctx.mode == SchemaMode.INLINE:
            if record in ctx.stack:
                cycle = " -> ".join(cls.__name__ for cls in [*ctx.stack, record])
                raise SchemaError(
                    f"Recursive type cannot be expanded inline ({cycle}); "
                    f"use referenced mode"
                )
            ctx.stack.append(record)
            try:
                return self._record_schema(self.plan.plan_for(record), ctx)
            finally:
                ctx.stack.pop()

        if record is ctx.root:
            return {"$ref": "#"}
        name = ctx.names.get(record)
        if name is None:
            name = self._def_name(record, ctx)
            ctx.names[record] = name
            ctx.defs[name] = {}
            ctx.defs[name] = self._record_schema(self.plan.plan_for(record), ctx)
        return {"$ref": f"#/$defs/{name}"}

    @staticmethod
    def _def_name(record: type, ctx: _Context) -> str:
        base = record.__name__
        if base not in ctx.defs:
            return base
        suffix = 2
        while f"{base}{suffix}" in ctx.defs:
            suffix += 1
        return f"{base}{suffix}"

    # -- fields -------------------------------------------------------------------

    def _field_schema(self, field_plan: FieldPlan, ctx: _Context) -> dict[str, Any]:
        type_info = field_plan.type_info
        schema = self._type_schema(
            type_info,
            ctx,
            element=field_plan.element_constraints if field_plan.dive else (),
            keys=field_plan.key_constraints if field_plan.dive else (),
        )
        self._apply(schema, field_plan.constraints, type_info.nullable)
        if isinstance(field_plan.default, StaticDefault):
            schema["default"] = field_plan.default.value
        return schema

    def _type_schema(
        self,
        type_info: TypeInfo | None,
        ctx: _Context,
        element: Iterable[Constraint] = (),
        keys: Iterable[Constraint] = (),
    ) -> dict[str, Any]:
        if type_info is None or type_info.kind == FieldKind.ANY:
            return {}
        kind = type_info.kind
        schema: dict[str, Any]
        if kind in _SCALAR_TYPES:
            schema = {"type": _SCALAR_TYPES[kind]}
        elif kind == FieldKind.SEQUENCE:
            schema = {"type": "array"}
            items = self._type_schema(type_info.element, ctx)
            self._apply(items, element, type_info.element is not None and type_info.element.nullable)
            if items:
                schema["items"] = items
        elif kind == FieldKind.MAP:
            schema = {"type": "object"}
            values = self._type_schema(type_info.element, ctx)
            self._apply(values, element, type_info.element is not None and type_info.element.nullable)
            if values:
                schema["additionalProperties"] = values
            names: dict[str, Any] = {}
            if type_info.key is not None and type_info.key.kind == FieldKind.INTEGER:
                names["pattern"] = "^-?[0-9]+$"
            self._apply(names, keys, False)
            if names:
                schema["propertyNames"] = names
        elif kind == FieldKind.RECORD and type_info.record is not None:
            schema = self._record_ref(type_info.record, ctx)
        else:
            return {}

        if type_info.nullable:
            schema = self._nullable(schema)
        return schema

    @staticmethod
    def _nullable(schema: dict[str, Any]) -> dict[str, Any]:
        if "$ref" in schema:
            return {"anyOf": [schema, {"type": "null"}]}
        kind = schema.get("type")
        if isinstance(kind, str):
            schema["type"] = [kind, "null"]
        return schema

    @staticmethod
    def _apply(schema: dict[str, Any], constraints: Iterable[Constraint], nullable: bool) -> None:
        for constraint in constraints:
            keywords = constraint.schema()
            if nullable and "enum" in keywords:
                keywords = {"enum": [*keywords["enum"], None]}
            merge_keywords(schema, keywords)
