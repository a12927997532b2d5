"""Tests for the custom validator registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

import fieldguard
from fieldguard.models.errors import ValidationError
from fieldguard.registry import CustomValidatorRegistry, RegistrationError
from fieldguard.service.validator import get_validator, validator_cache
from tests.conftest import Booking


def _noop(value: Any, param: str) -> None:
    return None


@dataclass
class Account:
    handle: str = field(default="", metadata={"validate": "username"})


class TestRegister:
    def test_register_and_lookup(self) -> None:
        CustomValidatorRegistry.register("slug", _noop)
        assert CustomValidatorRegistry.lookup("slug") is _noop
        assert CustomValidatorRegistry.available() == ["slug"]

    def test_decorator_form(self) -> None:
        @CustomValidatorRegistry.register("even")
        def even(value: Any, param: str) -> None:
            if value % 2:
                raise ValueError("must be even")

        assert CustomValidatorRegistry.lookup("even") is even

    def test_lookup_unknown(self) -> None:
        assert CustomValidatorRegistry.lookup("nothing") is None

    @pytest.mark.parametrize("name", ["min", "email", "required", "dive", "keys", "eqfield"])
    def test_builtins_cannot_be_overridden(self, name: str) -> None:
        with pytest.raises(RegistrationError, match="built-in constraints cannot be overridden"):
            CustomValidatorRegistry.register(name, _noop)

    @pytest.mark.parametrize("name", ["", "has space", "1abc", "a=b", "a,b"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(RegistrationError, match="not a valid constraint name"):
            CustomValidatorRegistry.register(name, _noop)

    def test_not_callable(self) -> None:
        with pytest.raises(RegistrationError, match="must be callable"):
            CustomValidatorRegistry.register("slug", "nope")  # type: ignore[arg-type]

    def test_replace_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        CustomValidatorRegistry.register("slug", _noop)
        with caplog.at_level(logging.WARNING, logger="fieldguard.registry"):
            CustomValidatorRegistry.register("slug", lambda value, param: None)
        assert "Replacing custom validator 'slug'" in caplog.text

    def test_unregister(self) -> None:
        CustomValidatorRegistry.register("slug", _noop)
        assert CustomValidatorRegistry.unregister("slug")
        assert not CustomValidatorRegistry.unregister("slug")
        assert CustomValidatorRegistry.lookup("slug") is None

    def test_reset(self) -> None:
        CustomValidatorRegistry.register("slug", _noop)
        CustomValidatorRegistry.register_alias("short", "max=3")
        CustomValidatorRegistry.reset()
        assert CustomValidatorRegistry.available() == []
        assert CustomValidatorRegistry.aliases() == {}


class TestAliases:
    def test_register_alias(self) -> None:
        CustomValidatorRegistry.register_alias("username", "alphanum,min=3")
        assert CustomValidatorRegistry.aliases() == {"username": "alphanum,min=3"}

    def test_alias_used_by_validator(self) -> None:
        fieldguard.register_alias("username", "alphanum,min=3")
        with pytest.raises(ValidationError) as excinfo:
            fieldguard.validate(Account(handle="a!"))
        assert [e.code for e in excinfo.value.errors] == ["MUST_BE_ALPHANUM", "MIN_LENGTH"]

    def test_empty_expansion(self) -> None:
        with pytest.raises(RegistrationError, match="must not be empty"):
            CustomValidatorRegistry.register_alias("blank", " ")

    def test_alias_and_validator_names_clash(self) -> None:
        CustomValidatorRegistry.register("slug", _noop)
        with pytest.raises(RegistrationError, match="already registered as a custom validator"):
            CustomValidatorRegistry.register_alias("slug", "max=3")
        CustomValidatorRegistry.register_alias("short", "max=3")
        with pytest.raises(RegistrationError, match="already registered as an alias"):
            CustomValidatorRegistry.register("short", _noop)


class TestCacheInvalidation:
    """Registry changes drop compiled validators so new registrations take effect."""

    def test_registration_clears_validator_cache(self) -> None:
        first = get_validator(Booking)
        assert len(validator_cache()) == 1
        CustomValidatorRegistry.register("slug", _noop)
        assert len(validator_cache()) == 0
        assert get_validator(Booking) is not first

    def test_struct_validator_seen_after_registration(self) -> None:
        fieldguard.validate(Booking(start=5, end=1))
        fieldguard.register_struct_validation(Booking, lambda booking: None)
        fieldguard.validate(Booking(start=5, end=1))

        def ordered(booking: Booking) -> None:
            if booking.end < booking.start:
                raise ValueError("end must not be before start")

        fieldguard.register_struct_validation(Booking, ordered)
        with pytest.raises(ValidationError, match="root: end must not be before start"):
            fieldguard.validate(Booking(start=5, end=1))

    def test_unknown_name_becomes_valid_after_registration(self) -> None:
        with pytest.raises(fieldguard.AnnotationError, match="unknown constraint 'username'"):
            get_validator(Account)
        fieldguard.register_validation("username", _noop)
        fieldguard.validate(Account(handle="anything"))
