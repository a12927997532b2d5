"""Static descriptions of record fields: kinds, type shapes and parsed annotations."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class FieldKind(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    RECORD = "record"
    SEQUENCE = "sequence"
    MAP = "map"
    ANY = "any"

    @property
    def is_collection(self) -> bool:
        return self in (FieldKind.SEQUENCE, FieldKind.MAP)

    @property
    def is_numeric(self) -> bool:
        return self in (FieldKind.INTEGER, FieldKind.NUMBER)


class Presence(StrEnum):
    """Whether a field's key existed in the raw input."""

    MISSING = "missing"
    PRESENT_NULL = "present_null"
    PRESENT_VALUE = "present_value"


class ExtraFields(StrEnum):
    """What the decoder does with input keys no field declares."""

    IGNORE = "ignore"
    FORBID = "forbid"
    ALLOW = "allow"  # kept in the record's ``extra_fields`` map


@dataclass(frozen=True)
class TypeInfo:
    """The shape of a field type after stripping ``Optional`` wrappers."""

    kind: FieldKind
    python_type: Any
    nullable: bool = False
    element: TypeInfo | None = None
    key: TypeInfo | None = None
    record: type | None = None
    container: type | None = None  # list / tuple / set for sequences

    def describe(self) -> str:
        if self.kind == FieldKind.RECORD and self.record is not None:
            return self.record.__name__
        return self.kind.value


@dataclass(frozen=True)
class ParsedTag:
    """A field annotation split into its collection, element and key sections.

    ``collection`` holds everything before ``dive``. With ``dive`` present,
    ``element`` applies to each element (or map value) and ``keys`` to each
    map key; without it both are empty.
    """

    collection: dict[str, str] = field(default_factory=dict)
    dive: bool = False
    element: dict[str, str] = field(default_factory=dict)
    keys: dict[str, str] = field(default_factory=dict)

    @property
    def required(self) -> bool:
        return "required" in self.collection

    @property
    def default(self) -> str | None:
        return self.collection.get("default")

    @property
    def default_method(self) -> str | None:
        return self.collection.get("defaultUsingMethod")

    @property
    def extra_fields(self) -> bool:
        return "extra_fields" in self.collection


@dataclass(frozen=True)
class FieldInfo:
    """One dataclass field as seen by the validator."""

    name: str
    wire_name: str
    type_info: TypeInfo
    tag: ParsedTag | None
    dataclass_field: dataclasses.Field[Any] | None = None

    @property
    def has_dataclass_default(self) -> bool:
        f = self.dataclass_field
        return f is not None and (
            f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        )

    def dataclass_default(self) -> Any:
        f = self.dataclass_field
        assert f is not None
        if f.default_factory is not dataclasses.MISSING:
            return f.default_factory()
        return f.default
