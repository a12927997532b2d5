"""Type introspection: turns a dataclass into an ordered list of FieldInfo."""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping
from typing import Any, Union, get_args, get_origin, get_type_hints

from fieldguard.models.errors import AnnotationError
from fieldguard.models.fields import FieldInfo, FieldKind, TypeInfo
from fieldguard.parser.annotation import parse_tag

_SEQUENCE_ORIGINS = {list: list, tuple: tuple, set: set, frozenset: frozenset}
_SCALARS: dict[type, FieldKind] = {
    str: FieldKind.STRING,
    bool: FieldKind.BOOLEAN,
    int: FieldKind.INTEGER,
    float: FieldKind.NUMBER,
}


def is_record_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _strip_optional(tp: Any) -> tuple[Any, bool]:
    """Collapse ``X | None`` (at any depth) into ``(X, True)``."""
    nullable = False
    while True:
        origin = get_origin(tp)
        if origin is typing.Annotated:
            tp = get_args(tp)[0]
            continue
        if origin is Union or origin is types.UnionType:
            args = [a for a in get_args(tp) if a is not type(None)]
            if len(args) < len(get_args(tp)):
                nullable = True
            if len(args) == 1:
                tp = args[0]
                continue
            return (Any if args else type(None)), nullable
        return tp, nullable


def resolve_type(tp: Any, where: str = "<type>") -> TypeInfo:
    """Describe a (possibly optional / generic) annotation as a TypeInfo."""
    tp, nullable = _strip_optional(tp)

    if tp is Any or tp is object:
        return TypeInfo(FieldKind.ANY, Any, nullable=nullable)
    if tp in _SCALARS:
        return TypeInfo(_SCALARS[tp], tp, nullable=nullable)
    if is_record_type(tp):
        return TypeInfo(FieldKind.RECORD, tp, nullable=nullable, record=tp)

    origin = get_origin(tp) or tp
    args = get_args(tp)

    if origin in _SEQUENCE_ORIGINS:
        element_tp: Any = Any
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                element_tp = args[0]
        elif args:
            element_tp = args[0]
        element = resolve_type(element_tp, f"{where}[]")
        return TypeInfo(
            FieldKind.SEQUENCE,
            tp,
            nullable=nullable,
            element=element,
            container=_SEQUENCE_ORIGINS[origin],
        )

    if origin is dict or origin is Mapping:
        key_tp, value_tp = args if len(args) == 2 else (str, Any)
        key = resolve_type(key_tp, f"{where}<key>")
        if key.kind not in (FieldKind.STRING, FieldKind.INTEGER):
            raise AnnotationError(f"{where}: map keys must be str or int, got {key_tp!r}")
        value = resolve_type(value_tp, f"{where}[]")
        return TypeInfo(FieldKind.MAP, tp, nullable=nullable, element=value, key=key, container=dict)

    raise AnnotationError(f"{where}: unsupported field type {tp!r}")


_ANY = TypeInfo(FieldKind.ANY, Any)


def type_info_for_value(value: Any) -> TypeInfo:
    """Describe a runtime value the way :func:`resolve_type` describes an annotation.

    Elements and keys of collections are left as ``any``; ``None`` becomes a
    nullable ``any``.
    """
    if value is None:
        return TypeInfo(FieldKind.ANY, Any, nullable=True)
    for tp, kind in _SCALARS.items():
        if isinstance(value, tp):
            return TypeInfo(kind, tp)
    for origin, container in _SEQUENCE_ORIGINS.items():
        if isinstance(value, origin):
            return TypeInfo(FieldKind.SEQUENCE, origin, element=_ANY, container=container)
    if isinstance(value, Mapping):
        return TypeInfo(FieldKind.MAP, dict, element=_ANY, key=_ANY, container=dict)
    return _ANY


def inspect_record(
    cls: type,
    *,
    tag_name: str = "validate",
    wire_name_key: str = "json",
    aliases: Mapping[str, str] | None = None,
) -> list[FieldInfo]:
    """Introspect one dataclass. Raises AnnotationError for unusable fields."""
    if not is_record_type(cls):
        raise AnnotationError(f"{cls!r} is not a dataclass")
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        raise AnnotationError(f"{cls.__name__}: cannot resolve type hints: {exc}") from exc

    fields: list[FieldInfo] = []
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        label = f"{cls.__name__}.{f.name}"
        type_info = resolve_type(hints.get(f.name, Any), label)
        raw = f.metadata.get(tag_name)
        if raw is not None and not isinstance(raw, str):
            raise AnnotationError(f"{label}: annotation must be a string, got {type(raw).__name__}")
        tag = parse_tag(raw, type_info.kind, label=label, aliases=aliases)
        wire_name = f.metadata.get(wire_name_key) or f.name
        fields.append(
            FieldInfo(
                name=f.name,
                wire_name=wire_name,
                type_info=type_info,
                tag=tag,
                dataclass_field=f,
            )
        )
    return fields
