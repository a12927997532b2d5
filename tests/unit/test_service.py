"""Tests for the Validator facade, its options and the shared validator cache."""

from __future__ import annotations

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import pytest

from fieldguard.models.errors import AnnotationError, DecodeError, ValidationError
from fieldguard.models.fields import ExtraFields
from fieldguard.schema.generator import SchemaMode
from fieldguard.service.validator import (
    Validator,
    ValidatorCache,
    ValidatorOptions,
    get_validator,
    validator_cache,
)
from fieldguard.settings import Settings, get_settings
from tests.conftest import SAMPLE_USER_JSON, Address, Envelope, Job, Patch, TreeNode, User


@dataclass
class Gadget:
    size: int = field(default=0, metadata={"check": "gte=1", "validate": "lte=0"})


class TestValidator:
    def test_construction_fails_on_defective_annotation(self) -> None:
        @dataclass
        class Broken:
            name: str = field(default="", metadata={"validate": "min=abc"})

        with pytest.raises(AnnotationError, match="Broken.name"):
            Validator(Broken)

    def test_validate_raises_with_all_errors(self) -> None:
        validator = Validator(User)
        with pytest.raises(ValidationError) as excinfo:
            validator.validate(User(name="A", email="nope"))
        assert excinfo.value.fields == ["name", "email"]
        assert str(excinfo.value) == "name: must be at least 2 characters (and 1 more errors)"

    def test_collect_errors_empty_when_valid(self) -> None:
        assert Validator(User).collect_errors(User(name="Ada")) == []

    def test_unmarshal(self) -> None:
        user = Validator(User).unmarshal(SAMPLE_USER_JSON)
        assert user.name == "Ada Lovelace"
        assert user.address is not None
        assert user.address.zip_code == "12345"
        assert user.role == "member"

    def test_decode_errors_are_raised_before_validation(self) -> None:
        with pytest.raises(ValidationError) as excinfo:
            Validator(User).unmarshal('{"age": "old", "email": "nope"}')
        assert excinfo.value.fields == ["name", "age"]

    def test_malformed_json(self) -> None:
        with pytest.raises(DecodeError, match="invalid JSON"):
            Validator(User).unmarshal('{"name": ')

    def test_from_yaml_span(self) -> None:
        with pytest.raises(ValidationError) as excinfo:
            Validator(User).from_yaml("name: Ada\nage: old\n", "user.yaml")
        error = excinfo.value.errors[0]
        assert error.field == "age"
        assert error.span is not None
        assert (error.span.file, error.span.line, error.span.column) == ("user.yaml", 2, 1)

    def test_to_dict_validates_first(self) -> None:
        validator = Validator(User)
        assert validator.to_dict(User(name="Ada"))["name"] == "Ada"
        with pytest.raises(ValidationError):
            validator.to_dict(User(name="A"))

    def test_method_default_via_facade(self) -> None:
        job = Validator(Job).from_dict({"name": "nightly", "queue": "batch"})
        assert job.retries == 3

    def test_repr(self) -> None:
        assert repr(Validator(Address)) == "Validator(Address)"


class TestSchemaCache:
    def test_schema_is_cached_per_mode(self) -> None:
        validator = Validator(TreeNode)
        first = validator.schema(SchemaMode.REFERENCED)
        first["title"] = "changed"
        assert validator.schema("referenced")["title"] == "TreeNode"

    def test_schema_json(self) -> None:
        text = Validator(Address).schema_json()
        assert json.loads(text)["title"] == "Address"
        assert "\n  " in text


class TestOptions:
    def test_resolved_falls_back_to_settings(self) -> None:
        resolved = ValidatorOptions().resolved()
        settings = get_settings()
        assert resolved.tag_name == settings.tag_name
        assert resolved.strict_missing_fields is settings.strict_missing_fields

    def test_custom_tag_name(self) -> None:
        validator = Validator(Gadget, ValidatorOptions(tag_name="check"))
        errors = validator.collect_errors(Gadget(size=0))
        assert [e.code for e in errors] == ["MIN_VALUE"]

    def test_relaxed_mode_rejects_defaults(self) -> None:
        with pytest.raises(AnnotationError, match="strict missing-field handling"):
            Validator(User, ValidatorOptions(strict_missing_fields=False))

    def test_relaxed_mode_decodes_without_presence(self) -> None:
        validator = Validator(TreeNode, ValidatorOptions(strict_missing_fields=False))
        node = validator.from_dict({"children": []})
        assert node.label == ""

    def test_options_are_hashable(self) -> None:
        assert hash(ValidatorOptions(tag_name="x")) == hash(ValidatorOptions(tag_name="x"))

    def test_dive_on_any_fails_construction(self) -> None:
        @dataclass
        class Loose:
            payload: Any = field(default=None, metadata={"validate": "dive,min=1"})

        with pytest.raises(AnnotationError, match="Loose.payload: 'dive' can only be used"):
            Validator(Loose)


class TestPartialValidation:
    def test_validate_partial_raises_for_selected_fields(self) -> None:
        validator = Validator(Patch)
        validator.validate_partial(Patch(title="Draft"), "title")
        with pytest.raises(ValidationError) as excinfo:
            validator.validate_partial(Patch(title="Draft", owner="nope"), "title", "ownerEmail")
        assert excinfo.value.fields == ["owner"]

    def test_validate_except(self) -> None:
        validator = Validator(Patch)
        validator.validate_except(Patch(title="Draft"), "owner")
        with pytest.raises(ValidationError) as excinfo:
            validator.validate_except(Patch(), "address")
        assert excinfo.value.fields == ["title", "owner"]


class TestExtraFieldOptions:
    """``extra_fields`` is resolved from options, then settings, then ``ignore``."""

    def test_forbid_rejects_unknown_keys(self) -> None:
        validator = Validator(User, ValidatorOptions(extra_fields=ExtraFields.FORBID))
        with pytest.raises(ValidationError) as excinfo:
            validator.unmarshal('{"name": "Ada", "nick": "countess"}')
        assert [(e.field, e.code) for e in excinfo.value.errors] == [("nick", "UNKNOWN_FIELD")]

    def test_forbid_closes_schema(self) -> None:
        schema = Validator(User, ValidatorOptions(extra_fields="forbid")).schema()
        assert schema["additionalProperties"] is False
        assert "additionalProperties" not in Validator(User).schema()

    def test_allow_keeps_unknown_keys(self) -> None:
        validator = Validator(Envelope, ValidatorOptions(extra_fields="allow"))
        envelope = validator.unmarshal('{"kind": "ping", "trace": "abc"}')
        assert envelope.extra == {"trace": "abc"}
        assert validator.to_dict(envelope) == {"kind": "ping", "trace": "abc"}

    def test_allow_needs_a_field_to_keep_them(self) -> None:
        with pytest.raises(AnnotationError, match="extra_fields=allow requires"):
            Validator(User, ValidatorOptions(extra_fields="allow"))

    def test_setting_is_the_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "fieldguard.service.validator.get_settings",
            lambda: Settings(_env_file=None, extra_fields="forbid"),
        )
        assert ValidatorOptions().resolved().extra_fields == ExtraFields.FORBID
        assert ValidatorOptions(extra_fields="ignore").resolved().extra_fields == ExtraFields.IGNORE


class TestSettings:
    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIELDGUARD_TAG_NAME", "check")
        monkeypatch.setenv("FIELDGUARD_MAX_DEPTH", "7")
        monkeypatch.setenv("FIELDGUARD_EXTRA_FIELDS", "forbid")
        settings = Settings()
        assert settings.tag_name == "check"
        assert settings.max_depth == 7
        assert settings.extra_fields == ExtraFields.FORBID

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.wire_name_key == "json"
        assert settings.strict_missing_fields is True
        assert settings.extra_fields == ExtraFields.IGNORE


class TestValidatorCache:
    def test_same_instance_per_type(self) -> None:
        assert get_validator(User) is get_validator(User)

    def test_options_are_part_of_the_key(self) -> None:
        default = get_validator(Gadget)
        custom = get_validator(Gadget, ValidatorOptions(tag_name="check"))
        assert default is not custom
        assert get_validator(Gadget, ValidatorOptions(tag_name="check")) is custom

    def test_concurrent_first_use_converges(self) -> None:
        cache = ValidatorCache()
        barrier = threading.Barrier(16)

        def build() -> Validator[User]:
            barrier.wait()
            return cache.get(User)

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(lambda _: build(), range(16)))
        assert len({id(v) for v in results}) == 1
        assert len(cache) == 1

    def test_shared_validator_is_thread_safe(self) -> None:
        validator = get_validator(User)
        users = [User(name="A" * (i % 3 + 1), tags=["x"] * (i % 2)) for i in range(64)]
        expected = [validator.collect_errors(u) for u in users]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(validator.collect_errors, users))
        assert results == expected

    def test_clear(self) -> None:
        get_validator(User)
        assert len(validator_cache()) >= 1
        validator_cache().clear()
        assert len(validator_cache()) == 0
