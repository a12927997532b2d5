"""Tests for validating standalone values against an annotation string."""

from __future__ import annotations

from typing import Any

import pytest

import fieldguard
from fieldguard.models.errors import AnnotationError, ValidationError
from fieldguard.models.fields import FieldKind
from fieldguard.parser.types import type_info_for_value
from fieldguard.registry import CustomValidatorRegistry
from fieldguard.validation.value import check_value, compile_value


def codes(errors: list[Any]) -> list[tuple[str, str]]:
    return [(e.field, e.code) for e in errors]


class TestCheckValue:
    def test_valid_value(self) -> None:
        assert check_value("ada@example.com", "required,email") == []

    def test_errors_name_the_value(self) -> None:
        assert codes(check_value("nope", "email,min=5")) == [
            ("value", "INVALID_EMAIL"),
            ("value", "MIN_LENGTH"),
        ]

    @pytest.mark.parametrize("value", [None, "", 0, []])
    def test_required_zero_values(self, value: Any) -> None:
        errors = check_value(value, "required,min=1")
        assert codes(errors) == [("value", "REQUIRED")]
        assert errors[0].message == "is required"

    def test_none_without_required_passes(self) -> None:
        assert check_value(None, "email,dive,min=2") == []

    def test_numbers(self) -> None:
        assert check_value(7, "gte=1,lte=10") == []
        assert codes(check_value(11.5, "lte=10")) == [("value", "MAX_VALUE")]

    def test_dive_into_sequence(self) -> None:
        errors = check_value(["ab", "c", ""], "max=3,dive,required,min=2")
        assert codes(errors) == [
            ("value[1]", "MIN_LENGTH"),
            ("value[2]", "REQUIRED"),
            ("value[2]", "MIN_LENGTH"),
        ]

    def test_dive_into_map_keys(self) -> None:
        errors = check_value({"ab": 1, "x": 0}, "dive,keys,min=2,endkeys,gte=1")
        assert codes(errors) == [("value[x]", "MIN_LENGTH"), ("value[x]", "MIN_VALUE")]

    def test_alternatives(self) -> None:
        assert check_value("10.0.0.1", "ipv4|hostname") == []
        assert codes(check_value("not a host", "ipv4|hostname")) == [
            ("value", "OR_CONSTRAINT_FAILED")
        ]

    def test_custom_validator(self) -> None:
        def even(value: Any, param: str) -> None:
            if value % 2:
                raise ValueError("must be even")

        CustomValidatorRegistry.register("even", even)
        assert codes(check_value(3, "even")) == [("value", "CUSTOM")]


class TestAnnotationDefects:
    @pytest.mark.parametrize(
        ("value", "annotation", "message"),
        [
            ("x", "eqfield=Other", "'eqfield' cannot be used on a standalone value"),
            ("x", "default=y", "'default' cannot be used on a standalone value"),
            ("x", "required=yes", "'required' does not take a parameter"),
            ("x", "dive,min=1", "'dive' can only be used on sequence or map types"),
            (3, "email", "constraint 'email' cannot be applied to integer field 'value'"),
            ("x", "shiny", "unknown constraint 'shiny'"),
        ],
    )
    def test_raises(self, value: Any, annotation: str, message: str) -> None:
        with pytest.raises(AnnotationError, match=message):
            check_value(value, annotation)


class TestCompileCache:
    def test_same_shape_reuses_plan(self) -> None:
        info = type_info_for_value("a")
        assert compile_value("min=1", info) is compile_value("min=1", info)

    def test_registry_change_clears_cache(self) -> None:
        """Replacing a validator is picked up by values checked afterwards."""

        def reject(value: Any, param: str) -> None:
            raise ValueError("rejected")

        CustomValidatorRegistry.register("shiny", reject)
        assert codes(check_value("x", "shiny")) == [("value", "CUSTOM")]
        CustomValidatorRegistry.register("shiny", lambda value, param: None)
        assert check_value("x", "shiny") == []


class TestTypeInfoForValue:
    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            ("a", FieldKind.STRING),
            (True, FieldKind.BOOLEAN),
            (1, FieldKind.INTEGER),
            (1.5, FieldKind.NUMBER),
            ([1], FieldKind.SEQUENCE),
            ((1,), FieldKind.SEQUENCE),
            ({"a": 1}, FieldKind.MAP),
            (object(), FieldKind.ANY),
        ],
    )
    def test_kinds(self, value: Any, kind: FieldKind) -> None:
        assert type_info_for_value(value).kind == kind

    def test_none_is_nullable_any(self) -> None:
        info = type_info_for_value(None)
        assert info.kind == FieldKind.ANY
        assert info.nullable


class TestValidateVar:
    def test_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError) as excinfo:
            fieldguard.validate_var("ada@example", "required,email")
        assert excinfo.value.fields == ["value"]
        assert str(excinfo.value) == "value: must be a valid email address"

    def test_valid_value_returns_none(self) -> None:
        assert fieldguard.validate_var(["ab"], "dive,min=2") is None
