"""Cross-field constraints: comparisons and conditional presence between siblings.

Target paths (``Other`` or ``Inner.MinValue``) are resolved against the
record type once, when the constraint is built, into an :class:`Accessor`.
At validation time the accessor only walks attributes.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, NoReturn, get_type_hints

from fieldguard.compiler.constraints import is_number, number_text
from fieldguard.models.errors import ConstraintError, FieldPathError
from fieldguard.models.fields import FieldInfo, FieldKind, TypeInfo
from fieldguard.parser.types import resolve_type


def is_zero(value: Any) -> bool:
    """Zero-value test used for ``required`` and the conditional constraints."""
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, dict)):
        return len(value) == 0
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False


class Accessor:
    """A precompiled attribute chain, e.g. ``("Inner", "MinValue")``."""

    __slots__ = ("path", "attrs", "type_info")

    def __init__(self, path: str, attrs: tuple[str, ...], type_info: TypeInfo) -> None:
        self.path = path
        self.attrs = attrs
        self.type_info = type_info

    def get(self, record: Any) -> Any:
        current = record
        for i, attr in enumerate(self.attrs):
            if current is None:
                parent = ".".join(self.attrs[:i])
                raise FieldPathError(self.path, f"{parent} is None")
            current = getattr(current, attr)
        return current


def build_accessor(path: str, fields: Sequence[FieldInfo], owner: str) -> Accessor:
    """Resolve ``path`` against a record's fields. Raises ValueError if it does not exist."""
    segments = path.split(".")
    if not path or any(not s for s in segments):
        raise ValueError(f"invalid field path '{path}'")

    current: dict[str, TypeInfo] | None = {f.name: f.type_info for f in fields}
    current_owner = owner
    type_info: TypeInfo | None = None
    for i, segment in enumerate(segments):
        if current is None:
            parent = ".".join(segments[:i])
            raise ValueError(f"'{parent}' is not a record, cannot resolve '{path}'")
        type_info = current.get(segment)
        if type_info is None:
            raise ValueError(f"field '{segment}' does not exist on {current_owner}")
        if type_info.kind == FieldKind.RECORD and type_info.record is not None:
            current_owner = type_info.record.__name__
            current = _field_types(type_info.record)
        else:
            current = None

    assert type_info is not None
    return Accessor(path, tuple(segments), type_info)


def _field_types(cls: type) -> dict[str, TypeInfo]:
    hints = get_type_hints(cls, include_extras=True)
    return {
        f.name: resolve_type(hints.get(f.name, Any), f"{cls.__name__}.{f.name}")
        for f in dataclasses.fields(cls)
    }


def split_condition(param: str) -> tuple[str, str]:
    """Split ``"Field value"`` (or ``"Field:value"``) into its two parts."""
    text = param.strip()
    parts = text.split(None, 1)
    if len(parts) == 2:
        return parts[0], parts[1].strip()
    if ":" in text:
        name, _, value = text.partition(":")
        return name.strip(), value.strip()
    raise ValueError(f"expected 'Field value', got '{param}'")


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


class CrossFieldConstraint(ABC):
    """A constraint that reads a sibling value through an accessor."""

    name: str = ""
    code: str = ""

    def __init__(self, param: str, accessor: Accessor) -> None:
        self.param = param
        self.accessor = accessor

    @property
    def target(self) -> str:
        return self.accessor.path

    def validate(self, value: Any, record: Any) -> None:
        self.check(value, self.accessor.get(record))

    @abstractmethod
    def check(self, value: Any, other: Any) -> None: ...

    def fail(self, message: str) -> NoReturn:
        raise ConstraintError(self.code, message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name}={self.param})"


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------


def _comparable(a: Any, b: Any) -> bool:
    if is_number(a) and is_number(b):
        return True
    return type(a) is type(b)


class _ComparisonConstraint(CrossFieldConstraint):
    message = ""
    ordered = True

    def check(self, value: Any, other: Any) -> None:
        if value is None or other is None:
            return
        if not _comparable(value, other):
            raise ConstraintError(
                "INVALID_TYPE",
                f"cannot compare {type(value).__name__} with field {self.target} "
                f"({type(other).__name__})",
            )
        if not self.holds(value, other):
            self.fail(f"{self.message} {self.target}")

    @abstractmethod
    def holds(self, value: Any, other: Any) -> bool: ...


class EqFieldConstraint(_ComparisonConstraint):
    name = "eqfield"
    code = "MUST_EQUAL_FIELD"
    message = "must equal field"
    ordered = False

    def holds(self, value: Any, other: Any) -> bool:
        return bool(value == other)


class NeFieldConstraint(_ComparisonConstraint):
    name = "nefield"
    code = "MUST_NOT_EQUAL_FIELD"
    message = "must not equal field"
    ordered = False

    def holds(self, value: Any, other: Any) -> bool:
        return bool(value != other)


class GtFieldConstraint(_ComparisonConstraint):
    name = "gtfield"
    code = "MUST_BE_GT_FIELD"
    message = "must be greater than field"

    def holds(self, value: Any, other: Any) -> bool:
        return bool(value > other)


class GteFieldConstraint(_ComparisonConstraint):
    name = "gtefield"
    code = "MUST_BE_GTE_FIELD"
    message = "must be at least field"

    def holds(self, value: Any, other: Any) -> bool:
        return bool(value >= other)


class LtFieldConstraint(_ComparisonConstraint):
    name = "ltfield"
    code = "MUST_BE_LT_FIELD"
    message = "must be less than field"

    def holds(self, value: Any, other: Any) -> bool:
        return bool(value < other)


class LteFieldConstraint(_ComparisonConstraint):
    name = "ltefield"
    code = "MUST_BE_LTE_FIELD"
    message = "must be at most field"

    def holds(self, value: Any, other: Any) -> bool:
        return bool(value <= other)


# ---------------------------------------------------------------------------
# Conditional presence
# ---------------------------------------------------------------------------


class _ConditionalConstraint(CrossFieldConstraint):
    """``required_*`` (field must be non-zero) / ``excluded_*`` (must be zero)."""

    requires_value = True

    def __init__(self, param: str, accessor: Accessor, compare_value: str | None = None) -> None:
        super().__init__(param, accessor)
        self.compare_value = compare_value

    def check(self, value: Any, other: Any) -> None:
        if not self.condition(other):
            return
        if self.requires_value and is_zero(value):
            self.fail(self.describe())
        if not self.requires_value and not is_zero(value):
            self.fail(self.describe())

    def equals(self, other: Any) -> bool:
        text = "" if other is None else number_text(other)
        return text == self.compare_value

    @abstractmethod
    def condition(self, other: Any) -> bool: ...

    @abstractmethod
    def describe(self) -> str: ...


class RequiredIfConstraint(_ConditionalConstraint):
    name = "required_if"
    code = "REQUIRED_IF"

    def condition(self, other: Any) -> bool:
        return self.equals(other)

    def describe(self) -> str:
        return f"is required when {self.target} equals '{self.compare_value}'"


class RequiredUnlessConstraint(_ConditionalConstraint):
    name = "required_unless"
    code = "REQUIRED_UNLESS"

    def condition(self, other: Any) -> bool:
        return not self.equals(other)

    def describe(self) -> str:
        return f"is required unless {self.target} equals '{self.compare_value}'"


class RequiredWithConstraint(_ConditionalConstraint):
    name = "required_with"
    code = "REQUIRED_WITH"

    def condition(self, other: Any) -> bool:
        return not is_zero(other)

    def describe(self) -> str:
        return f"is required when {self.target} is present"


class RequiredWithoutConstraint(_ConditionalConstraint):
    name = "required_without"
    code = "REQUIRED_WITHOUT"

    def condition(self, other: Any) -> bool:
        return is_zero(other)

    def describe(self) -> str:
        return f"is required when {self.target} is absent"


class ExcludedIfConstraint(_ConditionalConstraint):
    name = "excluded_if"
    code = "EXCLUDED_IF"
    requires_value = False

    def condition(self, other: Any) -> bool:
        return self.equals(other)

    def describe(self) -> str:
        return f"must be absent when {self.target} equals '{self.compare_value}'"


class ExcludedUnlessConstraint(_ConditionalConstraint):
    name = "excluded_unless"
    code = "EXCLUDED_UNLESS"
    requires_value = False

    def condition(self, other: Any) -> bool:
        return not self.equals(other)

    def describe(self) -> str:
        return f"must be absent unless {self.target} equals '{self.compare_value}'"


class ExcludedWithConstraint(_ConditionalConstraint):
    name = "excluded_with"
    code = "EXCLUDED_WITH"
    requires_value = False

    def condition(self, other: Any) -> bool:
        return not is_zero(other)

    def describe(self) -> str:
        return f"must be absent when {self.target} is present"


class ExcludedWithoutConstraint(_ConditionalConstraint):
    name = "excluded_without"
    code = "EXCLUDED_WITHOUT"
    requires_value = False

    def condition(self, other: Any) -> bool:
        return is_zero(other)

    def describe(self) -> str:
        return f"must be absent when {self.target} is absent"


COMPARISONS: dict[str, type[_ComparisonConstraint]] = {
    cls.name: cls
    for cls in (
        EqFieldConstraint,
        NeFieldConstraint,
        GtFieldConstraint,
        GteFieldConstraint,
        LtFieldConstraint,
        LteFieldConstraint,
    )
}

CONDITIONALS: dict[str, type[_ConditionalConstraint]] = {
    cls.name: cls
    for cls in (
        RequiredIfConstraint,
        RequiredUnlessConstraint,
        RequiredWithConstraint,
        RequiredWithoutConstraint,
        ExcludedIfConstraint,
        ExcludedUnlessConstraint,
        ExcludedWithConstraint,
        ExcludedWithoutConstraint,
    )
}

# Conditionals whose parameter is "Field value" rather than just "Field"
VALUE_CONDITIONALS = frozenset(
    {"required_if", "required_unless", "excluded_if", "excluded_unless"}
)
