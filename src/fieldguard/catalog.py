"""Constraint catalog: the fixed table of built-in constraint names.

Every annotation token is checked against this table when a validator is
built. The table records which field kinds a constraint can be attached to
and whether it takes a parameter; behaviour lives in
:mod:`fieldguard.compiler.constraints` and :mod:`fieldguard.compiler.crossfield`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from fieldguard.models.fields import FieldKind


class Category(StrEnum):
    PRESENCE = "presence"
    LENGTH = "length"
    NUMERIC = "numeric"
    STRING = "string"
    FORMAT = "format"
    ENUM = "enum"
    COLLECTION = "collection"
    CROSS_FIELD = "cross_field"


class Param(StrEnum):
    NONE = "none"
    REQUIRED = "required"


@dataclass(frozen=True)
class ConstraintEntry:
    name: str
    category: Category
    kinds: frozenset[FieldKind]
    param: Param = Param.NONE
    description: str = ""

    def supports(self, kind: FieldKind) -> bool:
        return kind == FieldKind.ANY or kind in self.kinds


# Structural markers understood by the annotation parser
DIVE = "dive"
KEYS = "keys"
ENDKEYS = "endkeys"
MARKERS = frozenset({DIVE, KEYS, ENDKEYS})
# Joins alternatives inside one token: ``email|uuid``
ANY_OF_SEPARATOR = "|"

_ALL = frozenset(FieldKind)
_SCALARS = frozenset({FieldKind.STRING, FieldKind.INTEGER, FieldKind.NUMBER, FieldKind.BOOLEAN})
_NUMERIC = frozenset({FieldKind.INTEGER, FieldKind.NUMBER})
_STRING = frozenset({FieldKind.STRING})
_SIZED = frozenset({FieldKind.STRING, FieldKind.SEQUENCE, FieldKind.MAP})
_BOUNDED = _SIZED | _NUMERIC
_COLLECTIONS = frozenset({FieldKind.SEQUENCE, FieldKind.MAP})
_ORDERED = frozenset({FieldKind.STRING, FieldKind.INTEGER, FieldKind.NUMBER})


def _spec(
    name: str,
    category: Category,
    kinds: frozenset[FieldKind],
    param: Param = Param.NONE,
    description: str = "",
) -> ConstraintEntry:
    return ConstraintEntry(name, category, kinds, param, description)


_ENTRIES: tuple[ConstraintEntry, ...] = (
    # Presence
    _spec("required", Category.PRESENCE, _ALL, description="key must be present in input"),
    _spec("default", Category.PRESENCE, _SCALARS, Param.REQUIRED, "literal used when key is missing"),
    _spec(
        "defaultUsingMethod",
        Category.PRESENCE,
        _ALL,
        Param.REQUIRED,
        "record method producing the value when key is missing",
    ),
    _spec(
        "extra_fields",
        Category.PRESENCE,
        frozenset({FieldKind.MAP}),
        description="map receiving undeclared input keys",
    ),
    # Length / value bounds
    _spec("min", Category.LENGTH, _BOUNDED, Param.REQUIRED, "lower bound (length, count or value)"),
    _spec("max", Category.LENGTH, _BOUNDED, Param.REQUIRED, "upper bound (length, count or value)"),
    _spec("len", Category.LENGTH, _SIZED, Param.REQUIRED, "exact length or count"),
    # Numeric
    _spec("gt", Category.NUMERIC, _NUMERIC, Param.REQUIRED),
    _spec("gte", Category.NUMERIC, _NUMERIC, Param.REQUIRED),
    _spec("lt", Category.NUMERIC, _NUMERIC, Param.REQUIRED),
    _spec("lte", Category.NUMERIC, _NUMERIC, Param.REQUIRED),
    _spec("positive", Category.NUMERIC, _NUMERIC),
    _spec("negative", Category.NUMERIC, _NUMERIC),
    _spec("multiple_of", Category.NUMERIC, _NUMERIC, Param.REQUIRED),
    _spec("max_digits", Category.NUMERIC, _NUMERIC, Param.REQUIRED),
    _spec("decimal_places", Category.NUMERIC, _NUMERIC, Param.REQUIRED),
    # String content
    _spec("alpha", Category.STRING, _STRING),
    _spec("alphanum", Category.STRING, _STRING),
    _spec("ascii", Category.STRING, _STRING),
    _spec("lowercase", Category.STRING, _STRING),
    _spec("uppercase", Category.STRING, _STRING),
    _spec("contains", Category.STRING, _STRING, Param.REQUIRED),
    _spec("excludes", Category.STRING, _STRING, Param.REQUIRED),
    _spec("startswith", Category.STRING, _STRING, Param.REQUIRED),
    _spec("endswith", Category.STRING, _STRING, Param.REQUIRED),
    _spec("regexp", Category.STRING, _STRING, Param.REQUIRED),
    # Formats
    _spec("email", Category.FORMAT, _STRING),
    _spec("url", Category.FORMAT, _STRING, description="http or https URL"),
    _spec("uri", Category.FORMAT, _STRING),
    _spec("uuid", Category.FORMAT, _STRING),
    _spec("ipv4", Category.FORMAT, _STRING),
    _spec("ipv6", Category.FORMAT, _STRING),
    _spec("ip", Category.FORMAT, _STRING),
    _spec("hostname", Category.FORMAT, _STRING),
    _spec("datetime", Category.FORMAT, _STRING, description="RFC 3339 timestamp"),
    # Enumerations
    _spec("oneof", Category.ENUM, _SCALARS, Param.REQUIRED, "space-separated allowed values"),
    # Collections
    _spec("unique", Category.COLLECTION, _COLLECTIONS),
    # Cross-field comparisons
    _spec("eqfield", Category.CROSS_FIELD, _SCALARS, Param.REQUIRED),
    _spec("nefield", Category.CROSS_FIELD, _SCALARS, Param.REQUIRED),
    _spec("gtfield", Category.CROSS_FIELD, _ORDERED, Param.REQUIRED),
    _spec("gtefield", Category.CROSS_FIELD, _ORDERED, Param.REQUIRED),
    _spec("ltfield", Category.CROSS_FIELD, _ORDERED, Param.REQUIRED),
    _spec("ltefield", Category.CROSS_FIELD, _ORDERED, Param.REQUIRED),
    # Cross-field conditional presence
    _spec("required_if", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field value"),
    _spec("required_unless", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field value"),
    _spec("required_with", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field"),
    _spec("required_without", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field"),
    _spec("excluded_if", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field value"),
    _spec("excluded_unless", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field value"),
    _spec("excluded_with", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field"),
    _spec("excluded_without", Category.CROSS_FIELD, _ALL, Param.REQUIRED, "Field"),
)

CATALOG: dict[str, ConstraintEntry] = {entry.name: entry for entry in _ENTRIES}

# Names consumed by the decoder rather than compiled into value checks
PRESENCE_NAMES = frozenset(
    name for name, entry in CATALOG.items() if entry.category == Category.PRESENCE
)
CROSS_FIELD_NAMES = frozenset(
    name for name, entry in CATALOG.items() if entry.category == Category.CROSS_FIELD
)


def lookup(name: str) -> ConstraintEntry | None:
    return CATALOG.get(name)


def is_builtin(name: str) -> bool:
    return name in CATALOG or name in MARKERS
