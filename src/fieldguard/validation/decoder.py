"""Presence-aware decoding of plain data (decoded JSON / YAML) into record instances.

For every field the decoder first classifies the input key as missing,
present-null or present-with-value (:class:`Presence`) and only then
converts it. This is what lets ``required`` and ``default=`` react to a
key that was absent rather than to a value that happens to be zero.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fieldguard.compiler.plan import FieldPlan, MethodDefault, RecordPlan, StaticDefault, zero_value
from fieldguard.models.errors import DecodeError, FieldError
from fieldguard.models.fields import ExtraFields, FieldKind, Presence, TypeInfo
from fieldguard.parser.loader import SourceMap
from fieldguard.validation.engine import index_path, join_path

logger = logging.getLogger("fieldguard.validation")

_SEQUENCE_TYPES = (list, tuple)


def json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def presence_of(data: Mapping[str, Any], key: str) -> Presence:
    if key not in data:
        return Presence.MISSING
    if data[key] is None:
        return Presence.PRESENT_NULL
    return Presence.PRESENT_VALUE


class PresenceDecoder:
    """Builds a record instance from a mapping, collecting decode errors.

    Decode errors use wire paths (``address.zip_code``, ``tags[2]``) since
    they describe the raw input. The caller decides what to do with them;
    :class:`fieldguard.service.validator.Validator` reports them before any
    constraint runs. Input keys no field declares are handled per
    :class:`ExtraFields`.
    """

    def __init__(
        self,
        plan: RecordPlan,
        *,
        strict_missing_fields: bool = True,
        extra_fields: ExtraFields = ExtraFields.IGNORE,
    ) -> None:
        self.plan = plan
        self.strict_missing_fields = strict_missing_fields
        self.extra_fields = ExtraFields(extra_fields)

    def decode(
        self, data: Any, source_map: SourceMap | None = None
    ) -> tuple[Any, list[FieldError]]:
        if not isinstance(data, Mapping):
            raise DecodeError(
                f"expected a JSON object for {self.plan.name}, got {json_type_name(data)}"
            )
        errors: list[FieldError] = []
        obj = self._decode_record(data, self.plan, "", errors, source_map)
        if errors:
            logger.debug("Decoding %s produced %d errors", self.plan.name, len(errors))
        return obj, errors

    # -- records ----------------------------------------------------------------

    def _decode_record(
        self,
        data: Mapping[str, Any],
        plan: RecordPlan,
        path: str,
        errors: list[FieldError],
        source_map: SourceMap | None,
    ) -> Any:
        kwargs: dict[str, Any] = {}
        declared: set[str] = set()
        for field_plan in plan.fields:
            if field_plan.extras:
                continue
            declared.add(field_plan.wire_name)
            wire_path = join_path(path, field_plan.wire_name)
            presence = presence_of(data, field_plan.wire_name)
            if presence == Presence.MISSING:
                kwargs[field_plan.name] = self._missing(field_plan, plan, wire_path, errors, source_map)
            elif presence == Presence.PRESENT_NULL:
                kwargs[field_plan.name] = (
                    None if field_plan.type_info.nullable else zero_value(field_plan.type_info)
                )
            else:
                kwargs[field_plan.name] = self._convert(
                    data[field_plan.wire_name], field_plan.type_info, plan, wire_path, errors, source_map
                )

        undeclared = [key for key in data if key not in declared]
        if undeclared and self.extra_fields == ExtraFields.FORBID:
            for key in undeclared:
                key_path = join_path(path, str(key))
                errors.append(
                    FieldError(
                        field=key_path,
                        message="unknown field",
                        value=data[key],
                        code="UNKNOWN_FIELD",
                        span=_span(source_map, key_path),
                    )
                )
        extras = plan.extras_field
        if extras is not None:
            if self.extra_fields == ExtraFields.ALLOW:
                kwargs[extras.name] = {key: data[key] for key in undeclared}
            elif extras.info.has_dataclass_default:
                kwargs[extras.name] = extras.info.dataclass_default()
            else:
                kwargs[extras.name] = zero_value(extras.type_info)
        return plan.record(**kwargs)

    def _missing(
        self,
        field_plan: FieldPlan,
        plan: RecordPlan,
        wire_path: str,
        errors: list[FieldError],
        source_map: SourceMap | None,
    ) -> Any:
        if self.strict_missing_fields:
            default = field_plan.default
            if isinstance(default, StaticDefault):
                return default.value
            if isinstance(default, MethodDefault):
                value, error = default.produce()
                if error is not None:
                    errors.append(
                        FieldError(
                            field=wire_path,
                            message=str(error),
                            code="DEFAULT_METHOD",
                            span=_span(source_map, wire_path),
                        )
                    )
                    return zero_value(field_plan.type_info)
                return value
            if field_plan.required:
                errors.append(
                    FieldError(
                        field=wire_path,
                        message="is required",
                        code="REQUIRED",
                        span=_span(source_map, wire_path.rpartition(".")[0]),
                    )
                )
                return zero_value(field_plan.type_info)
        if field_plan.info.has_dataclass_default:
            return field_plan.info.dataclass_default()
        return zero_value(field_plan.type_info)

    # -- values -------------------------------------------------------------------

    def _convert(
        self,
        value: Any,
        type_info: TypeInfo | None,
        plan: RecordPlan,
        path: str,
        errors: list[FieldError],
        source_map: SourceMap | None,
    ) -> Any:
        if type_info is None or type_info.kind == FieldKind.ANY:
            return value
        if value is None:
            return None if type_info.nullable else zero_value(type_info)

        kind = type_info.kind
        if kind == FieldKind.STRING and isinstance(value, str):
            return value
        if kind == FieldKind.INTEGER and isinstance(value, int) and not isinstance(value, bool):
            return value
        if kind == FieldKind.NUMBER and isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if kind == FieldKind.BOOLEAN and isinstance(value, bool):
            return value
        if kind == FieldKind.RECORD and isinstance(value, Mapping) and type_info.record is not None:
            nested = plan.plan_for(type_info.record)
            return self._decode_record(value, nested, path, errors, source_map)
        if kind == FieldKind.SEQUENCE and isinstance(value, _SEQUENCE_TYPES):
            items = [
                self._convert(item, type_info.element, plan, index_path(path, i), errors, source_map)
                for i, item in enumerate(value)
            ]
            container = type_info.container or list
            try:
                return items if container is list else container(items)
            except TypeError:
                errors.append(self._mismatch(type_info, value, path, source_map))
                return zero_value(type_info)
        if kind == FieldKind.MAP and isinstance(value, Mapping):
            result: dict[Any, Any] = {}
            for raw_key, item in value.items():
                item_path = index_path(path, raw_key)
                key = self._convert_key(raw_key, type_info.key, item_path, errors, source_map)
                result[key] = self._convert(
                    item, type_info.element, plan, item_path, errors, source_map
                )
            return result

        errors.append(self._mismatch(type_info, value, path, source_map))
        return zero_value(type_info)

    def _convert_key(
        self,
        raw_key: Any,
        type_info: TypeInfo | None,
        path: str,
        errors: list[FieldError],
        source_map: SourceMap | None,
    ) -> Any:
        if type_info is None or type_info.kind != FieldKind.INTEGER or not isinstance(raw_key, str):
            return raw_key
        try:
            return int(raw_key)
        except ValueError:
            errors.append(
                FieldError(
                    field=path,
                    message=f"invalid map key '{raw_key}': expected integer",
                    value=raw_key,
                    code="TYPE_MISMATCH",
                    span=_span(source_map, path),
                )
            )
            return raw_key

    @staticmethod
    def _mismatch(
        type_info: TypeInfo, value: Any, path: str, source_map: SourceMap | None
    ) -> FieldError:
        return FieldError(
            field=path or "root",
            message=f"invalid type: expected {type_info.describe()}, got {json_type_name(value)}",
            value=value,
            code="TYPE_MISMATCH",
            span=_span(source_map, path),
        )


def _span(source_map: SourceMap | None, path: str) -> Any:
    if source_map is None or not path:
        return None
    return source_map.get(path)


def to_wire(obj: Any, plan: RecordPlan) -> Any:
    """Serialise a record to plain data keyed by wire names."""
    return _encode(obj, plan, None)


def _encode(value: Any, plan: RecordPlan, type_info: TypeInfo | None) -> Any:
    if value is None:
        return None
    record = type(value)
    if record is plan.record or record in plan.nested:
        nested = plan.plan_for(record)
        data = {
            fp.wire_name: _encode(getattr(value, fp.name), plan, fp.type_info)
            for fp in nested.fields
            if not fp.extras
        }
        extras = nested.extras_field
        if extras is not None:
            for key, item in (getattr(value, extras.name) or {}).items():
                data.setdefault(key, item)
        return data
    if isinstance(value, dict):
        element = type_info.element if type_info is not None else None
        return {key: _encode(item, plan, element) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        element = type_info.element if type_info is not None else None
        return [_encode(item, plan, element) for item in value]
    return value
