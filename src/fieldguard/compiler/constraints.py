"""Built-in value constraints.

Each constraint is built once from its annotation parameter and is stateless
afterwards. ``validate`` raises :class:`ConstraintError` on failure and
returns ``None`` otherwise; ``None`` values are always skipped.  Bad
parameters raise ``ValueError`` from ``__init__`` and are turned into
:class:`AnnotationError` by the builder.
"""

from __future__ import annotations

import ipaddress
import math
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, NoReturn
from urllib.parse import urlparse

from fieldguard.models.errors import ConstraintError
from fieldguard.models.fields import FieldKind

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")
UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
ALPHA_RE = re.compile(r"^[a-zA-Z]+$")
ALPHANUM_RE = re.compile(r"^[a-zA-Z0-9]+$")
ASCII_UPPER_RE = re.compile(r"[A-Z]")
ASCII_LOWER_RE = re.compile(r"[a-z]")
HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}$)[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)

_SIZED_TYPES = (str, list, tuple, set, frozenset, dict)


# ---------------------------------------------------------------------------
# Parameter and value helpers
# ---------------------------------------------------------------------------


def parse_number(param: str) -> int | float:
    """Parse an int when possible, else a finite float."""
    text = param.strip()
    if not text:
        raise ValueError("requires a numeric parameter")
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        raise ValueError(f"invalid numeric parameter '{param}'") from None
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"invalid numeric parameter '{param}'")
    return number


def parse_count(param: str) -> int:
    text = param.strip()
    try:
        count = int(text)
    except ValueError:
        raise ValueError(f"invalid length parameter '{param}'") from None
    if count < 0:
        raise ValueError(f"length parameter must not be negative, got {count}")
    return count


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_text(value: Any) -> str:
    """String form used for enum comparison and messages (``2.0`` -> ``2``)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


EMPTY_STRING: dict[str, Any] = {"const": ""}


def allow_empty(keywords: dict[str, Any]) -> dict[str, Any]:
    """Widen string keywords so the skipped ``""`` still validates."""
    return {"anyOf": [keywords, dict(EMPTY_STRING)]}


def _plain_decimal(value: int | float) -> str:
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


class Constraint(ABC):
    """A compiled check for one annotation token."""

    name: str = ""
    code: str = ""

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        self.param = param
        self.kind = kind

    def validate(self, value: Any) -> None:
        if value is None:
            return
        self.check(value)

    @abstractmethod
    def check(self, value: Any) -> None: ...

    def schema(self) -> dict[str, Any]:
        """JSON Schema keywords equivalent to this constraint (may be empty)."""
        return {}

    def fail(self, message: str, code: str | None = None) -> NoReturn:
        raise ConstraintError(code or self.code, message)

    def require_string(self, value: Any) -> str:
        if not isinstance(value, str):
            self.fail("must be a string", "INVALID_TYPE")
        return value

    def require_number(self, value: Any) -> int | float:
        if not is_number(value):
            self.fail("must be a number", "INVALID_TYPE")
        return value

    def __repr__(self) -> str:
        if self.param:
            return f"{type(self).__name__}({self.name}={self.param})"
        return f"{type(self).__name__}({self.name})"


# ---------------------------------------------------------------------------
# Length / bounds
# ---------------------------------------------------------------------------


class _BoundConstraint(Constraint):
    """``min`` / ``max`` / ``len``: string length, element count or numeric value."""

    sized_word = ""
    numeric = True
    length_code = ""
    value_code = ""

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        if kind in (FieldKind.STRING, FieldKind.SEQUENCE, FieldKind.MAP) or not self.numeric:
            self.bound: int | float = parse_count(param)
        else:
            self.bound = parse_number(param)

    def check(self, value: Any) -> None:
        if isinstance(value, str):
            if self.violates(len(value)):
                self.fail(f"must be {self.sized_word} {self.bound} characters", self.length_code)
        elif isinstance(value, _SIZED_TYPES):
            if self.violates(len(value)):
                self.fail(f"must contain {self.sized_word} {self.bound} elements", self.length_code)
        elif is_number(value) and self.numeric:
            if self.violates(value):
                self.fail(f"must be {self.sized_word} {number_text(self.bound)}", self.value_code)
        else:
            self.fail(f"'{self.name}' cannot be applied to {type(value).__name__} values", "INVALID_TYPE")

    @abstractmethod
    def violates(self, measured: int | float) -> bool: ...


class MinConstraint(_BoundConstraint):
    name = "min"
    sized_word = "at least"
    length_code = "MIN_LENGTH"
    value_code = "MIN_VALUE"

    def violates(self, measured: int | float) -> bool:
        return measured < self.bound

    def schema(self) -> dict[str, Any]:
        keyword = {
            FieldKind.STRING: "minLength",
            FieldKind.SEQUENCE: "minItems",
            FieldKind.MAP: "minProperties",
            FieldKind.INTEGER: "minimum",
            FieldKind.NUMBER: "minimum",
        }.get(self.kind)
        return {keyword: self.bound} if keyword else {}


class MaxConstraint(_BoundConstraint):
    name = "max"
    sized_word = "at most"
    length_code = "MAX_LENGTH"
    value_code = "MAX_VALUE"

    def violates(self, measured: int | float) -> bool:
        return measured > self.bound

    def schema(self) -> dict[str, Any]:
        keyword = {
            FieldKind.STRING: "maxLength",
            FieldKind.SEQUENCE: "maxItems",
            FieldKind.MAP: "maxProperties",
            FieldKind.INTEGER: "maximum",
            FieldKind.NUMBER: "maximum",
        }.get(self.kind)
        return {keyword: self.bound} if keyword else {}


class LenConstraint(_BoundConstraint):
    name = "len"
    sized_word = "exactly"
    numeric = False
    length_code = "EXACT_LENGTH"

    def violates(self, measured: int | float) -> bool:
        return measured != self.bound

    def schema(self) -> dict[str, Any]:
        if self.kind == FieldKind.STRING:
            return {"minLength": self.bound, "maxLength": self.bound}
        if self.kind == FieldKind.SEQUENCE:
            return {"minItems": self.bound, "maxItems": self.bound}
        if self.kind == FieldKind.MAP:
            return {"minProperties": self.bound, "maxProperties": self.bound}
        return {}


# ---------------------------------------------------------------------------
# Numeric
# ---------------------------------------------------------------------------


class _ThresholdConstraint(Constraint):
    message = ""
    keyword = ""

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        self.threshold = parse_number(param)

    def check(self, value: Any) -> None:
        number = self.require_number(value)
        if not self.holds(number):
            self.fail(f"{self.message} {number_text(self.threshold)}")

    @abstractmethod
    def holds(self, number: int | float) -> bool: ...

    def schema(self) -> dict[str, Any]:
        return {self.keyword: self.threshold}


class GtConstraint(_ThresholdConstraint):
    name = "gt"
    code = "EXCLUSIVE_MIN"
    message = "must be greater than"
    keyword = "exclusiveMinimum"

    def holds(self, number: int | float) -> bool:
        return number > self.threshold


class GteConstraint(_ThresholdConstraint):
    name = "gte"
    code = "MIN_VALUE"
    message = "must be at least"
    keyword = "minimum"

    def holds(self, number: int | float) -> bool:
        return number >= self.threshold


class LtConstraint(_ThresholdConstraint):
    name = "lt"
    code = "EXCLUSIVE_MAX"
    message = "must be less than"
    keyword = "exclusiveMaximum"

    def holds(self, number: int | float) -> bool:
        return number < self.threshold


class LteConstraint(_ThresholdConstraint):
    name = "lte"
    code = "MAX_VALUE"
    message = "must be at most"
    keyword = "maximum"

    def holds(self, number: int | float) -> bool:
        return number <= self.threshold


class PositiveConstraint(Constraint):
    name = "positive"
    code = "MUST_BE_POSITIVE"

    def check(self, value: Any) -> None:
        if self.require_number(value) <= 0:
            self.fail("must be positive (greater than 0)")

    def schema(self) -> dict[str, Any]:
        return {"exclusiveMinimum": 0}


class NegativeConstraint(Constraint):
    name = "negative"
    code = "MUST_BE_NEGATIVE"

    def check(self, value: Any) -> None:
        if self.require_number(value) >= 0:
            self.fail("must be negative (less than 0)")

    def schema(self) -> dict[str, Any]:
        return {"exclusiveMaximum": 0}


class MultipleOfConstraint(Constraint):
    name = "multiple_of"
    code = "MULTIPLE_OF"

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        self.factor = parse_number(param)
        if self.factor <= 0:
            raise ValueError(f"multiple_of requires a positive factor, got {param}")
        self._factor = Decimal(repr(self.factor))

    def check(self, value: Any) -> None:
        number = self.require_number(value)
        if isinstance(number, float) and not math.isfinite(number):
            self.fail(f"must be a multiple of {number_text(self.factor)}")
        try:
            remainder = Decimal(repr(number)) % self._factor
        except InvalidOperation:
            self.fail(f"must be a multiple of {number_text(self.factor)}")
        if remainder != 0:
            self.fail(f"must be a multiple of {number_text(self.factor)}")

    def schema(self) -> dict[str, Any]:
        return {"multipleOf": self.factor}


class MaxDigitsConstraint(Constraint):
    name = "max_digits"
    code = "MAX_DIGITS"

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        self.max_digits = parse_count(param)

    def check(self, value: Any) -> None:
        text = _plain_decimal(self.require_number(value))
        digits = sum(1 for ch in text if ch.isdigit())
        if digits > self.max_digits:
            self.fail(f"must have at most {self.max_digits} digits")


class DecimalPlacesConstraint(Constraint):
    name = "decimal_places"
    code = "DECIMAL_PLACES"

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        self.max_places = parse_count(param)

    def check(self, value: Any) -> None:
        number = self.require_number(value)
        if isinstance(number, int):
            return
        text = _plain_decimal(number)
        places = len(text) - text.index(".") - 1 if "." in text else 0
        if places > self.max_places:
            self.fail(f"must have at most {self.max_places} decimal places")


# ---------------------------------------------------------------------------
# String content
# ---------------------------------------------------------------------------


class _StringConstraint(Constraint):
    """String checks that treat ``""`` as "not provided" and skip it."""

    def check(self, value: Any) -> None:
        text = self.require_string(value)
        if text == "":
            return
        self.check_string(text)

    @abstractmethod
    def check_string(self, text: str) -> None: ...


class AlphaConstraint(_StringConstraint):
    name = "alpha"
    code = "MUST_BE_ALPHA"

    def check_string(self, text: str) -> None:
        if not ALPHA_RE.match(text):
            self.fail("must contain only alphabetic characters")

    def schema(self) -> dict[str, Any]:
        return {"pattern": "^[a-zA-Z]*$"}


class AlphanumConstraint(_StringConstraint):
    name = "alphanum"
    code = "MUST_BE_ALPHANUM"

    def check_string(self, text: str) -> None:
        if not ALPHANUM_RE.match(text):
            self.fail("must contain only alphanumeric characters")

    def schema(self) -> dict[str, Any]:
        return {"pattern": "^[a-zA-Z0-9]*$"}


class AsciiConstraint(_StringConstraint):
    name = "ascii"
    code = "MUST_BE_ASCII"

    def check_string(self, text: str) -> None:
        if not text.isascii():
            self.fail("must contain only ASCII characters")

    def schema(self) -> dict[str, Any]:
        return {"pattern": "^[\\x00-\\x7F]*$"}


class LowercaseConstraint(_StringConstraint):
    """Case is checked for ASCII letters only, matching ``alpha``."""

    name = "lowercase"
    code = "MUST_BE_LOWERCASE"

    def check_string(self, text: str) -> None:
        if ASCII_UPPER_RE.search(text):
            self.fail("must be all lowercase")

    def schema(self) -> dict[str, Any]:
        return {"pattern": "^[^A-Z]*$"}


class UppercaseConstraint(_StringConstraint):
    name = "uppercase"
    code = "MUST_BE_UPPERCASE"

    def check_string(self, text: str) -> None:
        if ASCII_LOWER_RE.search(text):
            self.fail("must be all uppercase")

    def schema(self) -> dict[str, Any]:
        return {"pattern": "^[^a-z]*$"}


class _SubstringConstraint(Constraint):
    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        if param == "":
            raise ValueError(f"'{self.name}' requires a non-empty parameter")
        self.substring = param


class ContainsConstraint(_SubstringConstraint):
    """Unlike the other string checks this one applies to ``""`` too."""

    name = "contains"
    code = "MUST_CONTAIN"

    def check(self, value: Any) -> None:
        if self.substring not in self.require_string(value):
            self.fail(f"must contain '{self.substring}'")

    def schema(self) -> dict[str, Any]:
        return {"pattern": re.escape(self.substring)}


class ExcludesConstraint(_SubstringConstraint):
    name = "excludes"
    code = "MUST_NOT_CONTAIN"

    def check(self, value: Any) -> None:
        if self.substring in self.require_string(value):
            self.fail(f"must not contain '{self.substring}'")

    def schema(self) -> dict[str, Any]:
        return {"pattern": f"^(?![\\s\\S]*{re.escape(self.substring)})"}


class StartsWithConstraint(_SubstringConstraint, _StringConstraint):
    name = "startswith"
    code = "MUST_START_WITH"

    def check_string(self, text: str) -> None:
        if not text.startswith(self.substring):
            self.fail(f"must start with '{self.substring}'")

    def schema(self) -> dict[str, Any]:
        return {"pattern": f"^(?:{re.escape(self.substring)}|$)"}


class EndsWithConstraint(_SubstringConstraint, _StringConstraint):
    name = "endswith"
    code = "MUST_END_WITH"

    def check_string(self, text: str) -> None:
        if not text.endswith(self.substring):
            self.fail(f"must end with '{self.substring}'")

    def schema(self) -> dict[str, Any]:
        return {"pattern": f"(?:{re.escape(self.substring)}$|^$)"}


class RegexpConstraint(_StringConstraint):
    name = "regexp"
    code = "PATTERN_MISMATCH"

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        if param == "":
            raise ValueError("regexp requires a pattern")
        try:
            self.regex = re.compile(param)
        except re.error as exc:
            raise ValueError(f"invalid regex pattern '{param}': {exc}") from exc

    def check_string(self, text: str) -> None:
        if not self.regex.search(text):
            self.fail(f"must match pattern '{self.param}'")

    def schema(self) -> dict[str, Any]:
        return {"pattern": f"(?:{self.param})|^$"}


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


class _FormatConstraint(_StringConstraint):
    message = ""
    format_name: str | None = None

    def check_string(self, text: str) -> None:
        if not self.matches(text):
            self.fail(self.message)

    @abstractmethod
    def matches(self, text: str) -> bool: ...

    def schema(self) -> dict[str, Any]:
        return allow_empty({"format": self.format_name}) if self.format_name else {}


class EmailConstraint(_FormatConstraint):
    name = "email"
    code = "INVALID_EMAIL"
    message = "must be a valid email address"
    format_name = "email"

    def matches(self, text: str) -> bool:
        return EMAIL_RE.match(text) is not None


class UrlConstraint(_FormatConstraint):
    name = "url"
    code = "INVALID_URL"
    message = "must be a valid URL (http or https)"
    format_name = "uri"

    def matches(self, text: str) -> bool:
        try:
            parsed = urlparse(text)
        except ValueError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    def schema(self) -> dict[str, Any]:
        return allow_empty({"format": "uri", "pattern": "^[hH][tT][tT][pP][sS]?://[^/?#]"})


class UriConstraint(_FormatConstraint):
    name = "uri"
    code = "INVALID_URI"
    message = "must be a valid URI"
    format_name = "uri"

    def matches(self, text: str) -> bool:
        try:
            parsed = urlparse(text)
        except ValueError:
            return False
        return bool(parsed.scheme) and " " not in text


class UuidConstraint(_FormatConstraint):
    name = "uuid"
    code = "INVALID_UUID"
    message = "must be a valid UUID"
    format_name = "uuid"

    def matches(self, text: str) -> bool:
        return UUID_RE.match(text) is not None


class IPv4Constraint(_FormatConstraint):
    name = "ipv4"
    code = "INVALID_IPV4"
    message = "must be a valid IPv4 address"
    format_name = "ipv4"

    def matches(self, text: str) -> bool:
        try:
            ipaddress.IPv4Address(text)
        except ValueError:
            return False
        return True


class IPv6Constraint(_FormatConstraint):
    name = "ipv6"
    code = "INVALID_IPV6"
    message = "must be a valid IPv6 address"
    format_name = "ipv6"

    def matches(self, text: str) -> bool:
        try:
            ipaddress.IPv6Address(text)
        except ValueError:
            return False
        return True


class IPConstraint(_FormatConstraint):
    name = "ip"
    code = "INVALID_IP"
    message = "must be a valid IP address"

    def matches(self, text: str) -> bool:
        try:
            ipaddress.ip_address(text)
        except ValueError:
            return False
        return True

    def schema(self) -> dict[str, Any]:
        return {"anyOf": [{"format": "ipv4"}, {"format": "ipv6"}, dict(EMPTY_STRING)]}


class HostnameConstraint(_FormatConstraint):
    name = "hostname"
    code = "INVALID_HOSTNAME"
    message = "must be a valid hostname (RFC 1123)"
    format_name = "hostname"

    def matches(self, text: str) -> bool:
        return HOSTNAME_RE.match(text) is not None


class DatetimeConstraint(_FormatConstraint):
    name = "datetime"
    code = "INVALID_DATETIME"
    message = "must be a valid RFC 3339 date-time"
    format_name = "date-time"

    def matches(self, text: str) -> bool:
        if DATETIME_RE.match(text) is None:
            return False
        try:
            datetime.fromisoformat(text.upper().replace("Z", "+00:00"))
        except ValueError:
            return False
        return True


# ---------------------------------------------------------------------------
# Enum / collections
# ---------------------------------------------------------------------------


class OneOfConstraint(Constraint):
    name = "oneof"
    code = "INVALID_ENUM"

    def __init__(self, param: str = "", kind: FieldKind = FieldKind.ANY) -> None:
        super().__init__(param, kind)
        self.values = param.split()
        if not self.values:
            raise ValueError("oneof requires at least one value")
        self.typed_values = [_typed_literal(v, kind) for v in self.values]

    def check(self, value: Any) -> None:
        if isinstance(value, (dict, list, tuple, set, frozenset)):
            self.fail("must be a scalar value", "INVALID_TYPE")
        if self.kind.is_numeric and is_number(value):
            allowed = value in self.typed_values
        else:
            allowed = number_text(value) in self.values
        if not allowed:
            self.fail(f"must be one of: {', '.join(self.values)}")

    def schema(self) -> dict[str, Any]:
        return {"enum": list(self.typed_values)}


def _typed_literal(text: str, kind: FieldKind) -> Any:
    if kind == FieldKind.INTEGER:
        try:
            return int(text)
        except ValueError:
            raise ValueError(f"'{text}' is not a valid integer") from None
    if kind == FieldKind.NUMBER:
        return parse_number(text)
    if kind == FieldKind.BOOLEAN:
        if text not in ("true", "false"):
            raise ValueError(f"'{text}' is not a valid boolean (true/false)")
        return text == "true"
    return text


class UniqueConstraint(Constraint):
    name = "unique"
    code = "NOT_UNIQUE"

    def check(self, value: Any) -> None:
        if isinstance(value, dict):
            items = list(value.values())
            what = "values"
        elif isinstance(value, (list, tuple, set, frozenset)):
            items = list(value)
            what = "elements"
        else:
            self.fail("'unique' requires a sequence or map", "INVALID_TYPE")
        seen: list[Any] = []
        for item in items:
            if item in seen:
                self.fail(f"must contain unique {what}")
            seen.append(item)

    def schema(self) -> dict[str, Any]:
        return {"uniqueItems": True} if self.kind == FieldKind.SEQUENCE else {}


class AnyOfConstraint(Constraint):
    """``a|b|c``: passes when at least one alternative passes.

    Like the format checks it skips ``None`` and ``""``.
    """

    code = "OR_CONSTRAINT_FAILED"

    def __init__(
        self,
        expression: str,
        alternatives: list[Constraint],
        kind: FieldKind = FieldKind.ANY,
    ) -> None:
        super().__init__("", kind)
        self.name = expression
        self.alternatives = tuple(alternatives)

    def check(self, value: Any) -> None:
        if value == "":
            return
        for alternative in self.alternatives:
            try:
                alternative.validate(value)
            except ConstraintError:
                continue
            return
        self.fail(f"must match one of: {self.name}")

    def schema(self) -> dict[str, Any]:
        branches = [alternative.schema() for alternative in self.alternatives]
        if not all(branches):
            return {}
        if self.kind in (FieldKind.STRING, FieldKind.ANY):
            branches.append(dict(EMPTY_STRING))
        return {"anyOf": branches}

    def __repr__(self) -> str:
        return f"AnyOfConstraint({self.name})"


# ---------------------------------------------------------------------------
# Custom (registry-backed)
# ---------------------------------------------------------------------------


class CustomConstraint(Constraint):
    """Wraps a registered ``fn(value, param)``; ``ValueError`` becomes a failure."""

    code = "CUSTOM"

    def __init__(
        self,
        name: str,
        func: Callable[[Any, str], None],
        param: str = "",
        kind: FieldKind = FieldKind.ANY,
    ) -> None:
        super().__init__(param, kind)
        self.name = name
        self.func = func

    def check(self, value: Any) -> None:
        try:
            self.func(value, self.param)
        except ConstraintError:
            raise
        except ValueError as exc:
            self.fail(str(exc) or f"failed '{self.name}' validation")


BUILTIN_CONSTRAINTS: dict[str, type[Constraint]] = {
    cls.name: cls
    for cls in (
        MinConstraint,
        MaxConstraint,
        LenConstraint,
        GtConstraint,
        GteConstraint,
        LtConstraint,
        LteConstraint,
        PositiveConstraint,
        NegativeConstraint,
        MultipleOfConstraint,
        MaxDigitsConstraint,
        DecimalPlacesConstraint,
        AlphaConstraint,
        AlphanumConstraint,
        AsciiConstraint,
        LowercaseConstraint,
        UppercaseConstraint,
        ContainsConstraint,
        ExcludesConstraint,
        StartsWithConstraint,
        EndsWithConstraint,
        RegexpConstraint,
        EmailConstraint,
        UrlConstraint,
        UriConstraint,
        UuidConstraint,
        IPv4Constraint,
        IPv6Constraint,
        IPConstraint,
        HostnameConstraint,
        DatetimeConstraint,
        OneOfConstraint,
        UniqueConstraint,
    )
}
