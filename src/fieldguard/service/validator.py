"""Validator facade and the process-wide validator cache."""

from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from fieldguard.compiler.plan import RecordPlan, compile_record
from fieldguard.models.errors import FieldError, ValidationError
from fieldguard.models.fields import ExtraFields
from fieldguard.parser.loader import InputLoader, SourceMap
from fieldguard.registry import CustomValidatorRegistry
from fieldguard.schema.generator import SchemaGenerator, SchemaMode
from fieldguard.settings import get_settings
from fieldguard.validation.decoder import PresenceDecoder, to_wire
from fieldguard.validation.engine import RecordValidator

logger = logging.getLogger("fieldguard.service")

T = TypeVar("T")


class ValidatorOptions(BaseModel):
    """Per-validator overrides; ``None`` falls back to :class:`Settings`."""

    model_config = ConfigDict(frozen=True)

    tag_name: str | None = None
    wire_name_key: str | None = None
    strict_missing_fields: bool | None = None
    extra_fields: ExtraFields | None = None

    def resolved(self) -> ValidatorOptions:
        settings = get_settings()
        return ValidatorOptions(
            tag_name=self.tag_name or settings.tag_name,
            wire_name_key=self.wire_name_key or settings.wire_name_key,
            strict_missing_fields=(
                settings.strict_missing_fields
                if self.strict_missing_fields is None
                else self.strict_missing_fields
            ),
            extra_fields=self.extra_fields or settings.extra_fields,
        )


class Validator(Generic[T]):
    """Compiled validator for one record type.

    Construction parses and compiles every annotation in the type graph and
    raises :class:`AnnotationError` for any defect. Afterwards the instance
    is immutable (apart from its lazily filled schema cache) and can be
    shared between threads.
    """

    def __init__(self, record: type[T], options: ValidatorOptions | None = None) -> None:
        self.record = record
        self.options = (options or ValidatorOptions()).resolved()
        strict = bool(self.options.strict_missing_fields)
        extra_fields = self.options.extra_fields or ExtraFields.IGNORE
        self.plan: RecordPlan = compile_record(
            record,
            tag_name=self.options.tag_name,
            wire_name_key=self.options.wire_name_key,
            strict_missing_fields=strict,
            extra_fields=extra_fields,
        )
        self._engine = RecordValidator(self.plan, strict_missing_fields=strict)
        self._decoder = PresenceDecoder(
            self.plan, strict_missing_fields=strict, extra_fields=extra_fields
        )
        self._loader = InputLoader()
        self._schemas: dict[SchemaMode, dict[str, Any]] = {}
        self._schema_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Validator({self.record.__name__})"

    # -- validation ---------------------------------------------------------------

    def collect_errors(self, obj: Any) -> list[FieldError]:
        """Return every violation in ``obj`` (empty when valid)."""
        return self._engine.validate(obj)

    def validate(self, obj: Any) -> None:
        """Raise :class:`ValidationError` if ``obj`` violates any constraint."""
        self._raise_if(self._engine.validate(obj))

    def validate_partial(self, obj: Any, *fields: str) -> None:
        """Validate only the named top-level fields of ``obj``.

        Names may be wire names or attribute names; an unknown name raises
        :class:`ValueError`. Selected ``required`` fields must be non-zero.
        """
        self._raise_if(self._engine.validate_partial(obj, fields))

    def validate_except(self, obj: Any, *fields: str) -> None:
        """Validate every top-level field of ``obj`` except the named ones."""
        self._raise_if(self._engine.validate_except(obj, fields))

    @staticmethod
    def _raise_if(errors: list[FieldError]) -> None:
        if errors:
            raise ValidationError(errors)

    # -- decoding -----------------------------------------------------------------

    def from_dict(self, data: Any, source_map: SourceMap | None = None) -> T:
        """Decode already-parsed data, then validate it.

        Decode errors (missing required keys, type mismatches, default
        method failures) are raised together before any constraint runs.
        """
        obj, errors = self._decoder.decode(data, source_map)
        if errors:
            raise ValidationError(errors)
        self.validate(obj)
        return obj

    def unmarshal(self, data: str | bytes) -> T:
        """Parse JSON text into a validated ``T``."""
        return self.from_dict(self._loader.load_json(data))

    def from_yaml(self, text: str, filename: str = "<string>") -> T:
        """Parse YAML text into a validated ``T``; decode errors carry source spans."""
        data, source_map = self._loader.load_yaml(text, filename)
        return self.from_dict(data, source_map)

    def from_yaml_file(self, path: Path) -> T:
        data, source_map = self._loader.load_yaml_file(path)
        return self.from_dict(data, source_map)

    def to_dict(self, obj: T) -> dict[str, Any]:
        """Validate ``obj`` and dump it to plain data keyed by wire names."""
        self.validate(obj)
        return to_wire(obj, self.plan)

    # -- schema -------------------------------------------------------------------

    def schema(self, mode: SchemaMode | str = SchemaMode.INLINE) -> dict[str, Any]:
        mode = SchemaMode(mode)
        cached = self._schemas.get(mode)
        if cached is None:
            with self._schema_lock:
                cached = self._schemas.get(mode)
                if cached is None:
                    generator = SchemaGenerator(
                        self.plan,
                        forbid_extra_fields=self.options.extra_fields == ExtraFields.FORBID,
                    )
                    cached = generator.generate(mode)
                    self._schemas[mode] = cached
        return copy.deepcopy(cached)

    def schema_json(self, mode: SchemaMode | str = SchemaMode.INLINE, indent: int = 2) -> str:
        return json.dumps(self.schema(mode), indent=indent)


# ---------------------------------------------------------------------------
# Validator cache
# ---------------------------------------------------------------------------


class ValidatorCache:
    """Process-wide cache of compiled validators.  Thread-safe via ``threading.Lock``.

    Lookups take a lock-free fast path; a miss compiles under the lock so
    concurrent first use converges on one instance per (type, options).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._validators: dict[tuple[type, ValidatorOptions], Validator[Any]] = {}

    def get(self, record: type[T], options: ValidatorOptions | None = None) -> Validator[T]:
        key = (record, (options or ValidatorOptions()).resolved())
        validator = self._validators.get(key)
        if validator is not None:
            return validator
        with self._lock:
            validator = self._validators.get(key)
            if validator is None:
                logger.debug("Validator cache miss for %s", record.__name__)
                validator = Validator(record, key[1])
                self._validators[key] = validator
        return validator

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._validators)
            self._validators = {}
        if dropped:
            logger.debug("Cleared %d cached validators", dropped)

    def __len__(self) -> int:
        return len(self._validators)


_cache = ValidatorCache()
CustomValidatorRegistry.add_listener(_cache.clear)


def get_validator(record: type[T], options: ValidatorOptions | None = None) -> Validator[T]:
    """Return the shared validator for ``record`` (compiled on first use)."""
    return _cache.get(record, options)


def clear_validator_cache() -> None:
    _cache.clear()


def validator_cache() -> ValidatorCache:
    return _cache
