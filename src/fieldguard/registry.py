"""Custom validator registry: user constraints, aliases and struct-level validators."""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Iterable
from typing import Any

from fieldguard.catalog import is_builtin
from fieldguard.models.errors import FieldError, FieldguardError

logger = logging.getLogger("fieldguard.registry")

CustomFunc = Callable[[Any, str], None]
StructFunc = Callable[[Any], Iterable[FieldError] | None]

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class RegistrationError(FieldguardError):
    """Raised when a name cannot be registered (invalid or a built-in)."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Cannot register '{name}': {reason}")


class CustomValidatorRegistry:
    """Process-wide registry consulted when validators are built.

    Names resolve in order: built-in catalog, then registered custom
    validators. Built-in names cannot be overridden. Any change notifies the
    listeners (the validator cache) so later validators see the new entries.
    """

    _validators: dict[str, CustomFunc] = {}
    _aliases: dict[str, str] = {}
    _struct_validators: dict[type, list[StructFunc]] = {}
    _listeners: list[Callable[[], None]] = []
    _lock = threading.Lock()

    @classmethod
    def _check_name(cls, name: str) -> None:
        if not _NAME_RE.match(name):
            raise RegistrationError(name, "not a valid constraint name")
        if is_builtin(name):
            raise RegistrationError(name, "built-in constraints cannot be overridden")

    @classmethod
    def register(cls, name: str, func: CustomFunc | None = None) -> Any:
        """Register ``func(value, param)``. Can be used as a decorator.

        The function signals failure by raising ``ValueError`` (or
        :class:`ConstraintError` for a custom code).
        """
        if func is None:

            def decorator(f: CustomFunc) -> CustomFunc:
                cls.register(name, f)
                return f

            return decorator

        cls._check_name(name)
        if not callable(func):
            raise RegistrationError(name, "validator must be callable")
        with cls._lock:
            if name in cls._aliases:
                raise RegistrationError(name, "name is already registered as an alias")
            if name in cls._validators:
                logger.warning("Replacing custom validator '%s'", name)
            cls._validators[name] = func
        cls._changed()
        return func

    @classmethod
    def lookup(cls, name: str) -> CustomFunc | None:
        return cls._validators.get(name)

    @classmethod
    def unregister(cls, name: str) -> bool:
        with cls._lock:
            removed = cls._validators.pop(name, None) is not None
        if removed:
            cls._changed()
        return removed

    @classmethod
    def available(cls) -> list[str]:
        """List registered custom validator names."""
        return sorted(cls._validators.keys())

    # -- aliases --------------------------------------------------------------

    @classmethod
    def register_alias(cls, name: str, expansion: str) -> None:
        """Register ``name`` as shorthand for a constraint list (``"alphanum,min=3"``)."""
        cls._check_name(name)
        if not expansion or not expansion.strip():
            raise RegistrationError(name, "alias expansion must not be empty")
        with cls._lock:
            if name in cls._validators:
                raise RegistrationError(name, "name is already registered as a custom validator")
            if name in cls._aliases:
                logger.warning("Replacing alias '%s'", name)
            cls._aliases[name] = expansion
        cls._changed()

    @classmethod
    def aliases(cls) -> dict[str, str]:
        return dict(cls._aliases)

    # -- struct-level validators ----------------------------------------------

    @classmethod
    def register_struct_validator(cls, record_type: type, func: StructFunc) -> None:
        """Run ``func(obj)`` after the field checks of every ``record_type`` value.

        ``func`` returns ``FieldError``s (field names relative to the record,
        ``""`` for the record itself) or raises ``ValueError``.
        """
        with cls._lock:
            cls._struct_validators.setdefault(record_type, []).append(func)
        cls._changed()

    @classmethod
    def struct_validators(cls, record_type: type) -> tuple[StructFunc, ...]:
        return tuple(cls._struct_validators.get(record_type, ()))

    # -- change notification --------------------------------------------------

    @classmethod
    def add_listener(cls, listener: Callable[[], None]) -> None:
        with cls._lock:
            if listener not in cls._listeners:
                cls._listeners.append(listener)

    @classmethod
    def _changed(cls) -> None:
        for listener in list(cls._listeners):
            listener()

    @classmethod
    def reset(cls) -> None:
        """Clear all registrations (for testing). Listeners are kept."""
        with cls._lock:
            cls._validators.clear()
            cls._aliases.clear()
            cls._struct_validators.clear()
        cls._changed()
