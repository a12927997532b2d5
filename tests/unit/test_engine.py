"""Tests for the recursive validation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from fieldguard.compiler import compile_record
from fieldguard.models.errors import ConstraintError, FieldError
from fieldguard.registry import CustomValidatorRegistry
from fieldguard.validation.engine import RecordValidator
from tests.conftest import (
    Address,
    Booking,
    Bounds,
    Contacts,
    Endpoint,
    Measurement,
    Patch,
    Payment,
    Scores,
    Team,
    TreeNode,
    User,
)


def errors_for(obj: Any, record: type | None = None) -> list[FieldError]:
    plan = compile_record(record or type(obj))
    return RecordValidator(plan).validate(obj)


def fields_of(errors: list[FieldError]) -> list[str]:
    return [e.field for e in errors]


class TestRoot:
    def test_valid_value(self) -> None:
        assert errors_for(User(name="Ada", email="ada@example.com", age=36)) == []

    def test_none_root(self) -> None:
        errors = errors_for(None, User)
        assert len(errors) == 1
        assert errors[0].field == "root"
        assert errors[0].message == "cannot validate None"

    def test_wrong_root_type(self) -> None:
        errors = errors_for(Address(), User)
        assert errors[0].code == "INVALID_TYPE"
        assert errors[0].message == "expected User, got Address"

    def test_top_level_required_is_not_a_zero_check(self) -> None:
        # Presence of top-level keys is the decoder's job
        errors = errors_for(User(name=""))
        assert fields_of(errors) == ["name"]
        assert errors[0].code == "MIN_LENGTH"

    def test_errors_accumulate_in_declaration_order(self) -> None:
        errors = errors_for(User(name="A", email="nope", age=200, role="root"))
        assert fields_of(errors) == ["name", "email", "age", "role"]
        assert [e.code for e in errors] == ["MIN_LENGTH", "INVALID_EMAIL", "MAX_VALUE", "INVALID_ENUM"]

    def test_error_carries_value(self) -> None:
        errors = errors_for(User(name="Ada", age=-1))
        assert errors[0].value == -1

    def test_idempotent(self) -> None:
        user = User(name="A", email="nope", tags=["x", "yy", "z"])
        plan = compile_record(User)
        validator = RecordValidator(plan)
        assert validator.validate(user) == validator.validate(user)


class TestCollections:
    """Collection constraints apply to the container; ``dive`` constraints to each element."""

    def test_collection_constraint_applies_to_collection(self) -> None:
        errors = errors_for(Team(title="core", members=[]))
        assert fields_of(errors) == ["members"]
        assert errors[0].message == "must contain at least 1 elements"

    def test_dive_applies_to_each_element(self) -> None:
        errors = errors_for(User(name="Ada", tags=["ab", "x", "yz", "q"]))
        assert fields_of(errors) == ["tags[1]", "tags[3]"]
        assert errors[0].message == "must be at least 2 characters"

    def test_collection_and_element_constraints_together(self) -> None:
        errors = errors_for(User(name="Ada", tags=["a", "bb", "cc", "dd", "ee", "ff"]))
        assert fields_of(errors) == ["tags", "tags[0]"]
        assert errors[0].code == "MAX_LENGTH"

    def test_map_keys_and_values(self) -> None:
        errors = errors_for(Contacts(contacts={"ab": "ab@example.com", "admin": "nope"}))
        assert fields_of(errors) == ["contacts[ab]", "contacts[admin]"]
        assert errors[0].code == "MIN_LENGTH"
        assert errors[1].code == "INVALID_EMAIL"

    def test_map_key_and_value_fail_independently(self) -> None:
        errors = errors_for(Contacts(contacts={"ab": "nope"}))
        assert fields_of(errors) == ["contacts[ab]", "contacts[ab]"]
        assert [e.code for e in errors] == ["MIN_LENGTH", "INVALID_EMAIL"]

    def test_integer_map_keys(self) -> None:
        errors = errors_for(Scores(scores={0: 50, 2: 101}))
        assert fields_of(errors) == ["scores[0]", "scores[2]"]
        assert [e.code for e in errors] == ["MIN_VALUE", "MAX_VALUE"]

    def test_records_in_sequences_are_always_visited(self) -> None:
        """Records inside collections are validated even without ``dive``."""
        team = Team(title="core", members=[User(name="Ada"), User(name="Bob", email="bad")])
        errors = errors_for(team)
        assert fields_of(errors) == ["members[1].email"]

    def test_none_elements_are_skipped(self) -> None:
        team = Team(title="core", members=[None, User(name="Ada")])  # type: ignore[list-item]
        assert errors_for(team) == []


class TestNested:
    """Nested records lose presence information, so ``required`` is a zero check there."""

    def test_nested_record_path(self) -> None:
        user = User(name="Ada", address=Address(street="Main", city="X", zip_code="1"))
        errors = errors_for(user)
        assert fields_of(errors) == ["address.city", "address.zip_code"]

    def test_nested_required_zero_value(self) -> None:
        user = User(name="Ada", address=Address(street="", city="Paris"))
        errors = errors_for(user)
        assert fields_of(errors) == ["address.street"]
        assert errors[0].code == "REQUIRED"
        assert errors[0].message == "is required"

    def test_nested_required_skips_other_checks(self) -> None:
        user = User(name="Ada", address=Address(street="Main", city=""))
        errors = errors_for(user)
        assert fields_of(errors) == ["address.city"]
        assert errors[0].code == "REQUIRED"

    def test_required_in_sequence_elements(self) -> None:
        team = Team(title="core", members=[User(name="")])
        errors = errors_for(team)
        assert fields_of(errors) == ["members[0].name"]
        assert errors[0].code == "REQUIRED"

    def test_relaxed_mode_skips_nested_required(self) -> None:
        plan = compile_record(Measurement, strict_missing_fields=False)
        validator = RecordValidator(plan, strict_missing_fields=False)
        assert validator.validate(Measurement(bounds=Bounds(low=1, high=3), value=2)) == []

    def test_recursive_type(self) -> None:
        tree = TreeNode(label="root", children=[TreeNode(label="a"), TreeNode(label="")])
        errors = errors_for(tree)
        assert fields_of(errors) == ["children[1].label"]

    def test_recursive_collection_constraint(self) -> None:
        leaves = [TreeNode(label=str(i)) for i in range(4)]
        tree = TreeNode(label="root", children=[TreeNode(label="a", children=leaves)])
        assert fields_of(errors_for(tree)) == ["children[0].children"]


class TestCrossField:
    def test_excluded_if(self) -> None:
        errors = errors_for(Payment(method="card", cash_amount=100, card_number="4111"))
        assert fields_of(errors) == ["cash_amount"]
        assert errors[0].code == "EXCLUDED_IF"

    def test_excluded_if_condition_not_met(self) -> None:
        assert errors_for(Payment(method="cash", cash_amount=100)) == []

    def test_required_if(self) -> None:
        errors = errors_for(Payment(method="card"))
        assert fields_of(errors) == ["card_number"]
        assert errors[0].message == "is required when method equals 'card'"

    def test_nested_sibling_path(self) -> None:
        errors = errors_for(Measurement(bounds=Bounds(low=5, high=10), value=11))
        assert fields_of(errors) == ["value"]
        assert errors[0].code == "MUST_BE_LTE_FIELD"

    def test_sibling_comparison_inside_nested_record(self) -> None:
        errors = errors_for(Measurement(bounds=Bounds(low=5, high=1), value=5))
        assert "bounds.high" in fields_of(errors)

    def test_none_intermediate_reports_field_path(self) -> None:
        """A ``None`` record on the way to a cross-field target is reported on the field."""
        errors = errors_for(Measurement(bounds=None, value=3))
        assert fields_of(errors) == ["value", "value"]
        assert {e.code for e in errors} == {"FIELD_PATH"}
        assert errors[0].message == "cannot resolve field path bounds.low: bounds is None"


class TestCustomAndStruct:
    """Registered field validators and record-level validators."""

    def test_custom_constraint(self) -> None:
        def even(value: Any, param: str) -> None:
            if value % 2:
                raise ValueError("must be even")

        CustomValidatorRegistry.register("even", even)

        @dataclass
        class Counter:
            count: int = field(default=0, metadata={"validate": "even"})

        errors = errors_for(Counter(count=3))
        assert fields_of(errors) == ["count"]
        assert errors[0].code == "CUSTOM"
        assert errors[0].message == "must be even"

    def test_struct_validator_paths(self) -> None:
        def ordered(booking: Booking) -> list[FieldError]:
            if booking.end < booking.start:
                return [FieldError(field="end", message="must not be before start")]
            return []

        CustomValidatorRegistry.register_struct_validator(Booking, ordered)
        errors = errors_for(Booking(start=5, end=1))
        assert fields_of(errors) == ["end"]

    def test_struct_validator_value_error_at_root(self) -> None:
        def reject(booking: Booking) -> None:
            raise ValueError("bookings are closed")

        CustomValidatorRegistry.register_struct_validator(Booking, reject)
        errors = errors_for(Booking())
        assert errors[0].field == "root"
        assert errors[0].code == "CUSTOM"
        assert errors[0].message == "bookings are closed"

    def test_struct_validator_on_nested_record(self) -> None:
        def no_main(address: Address) -> None:
            if address.street == "Main":
                raise ConstraintError("BLOCKED_STREET", "street is blocked")

        CustomValidatorRegistry.register_struct_validator(Address, no_main)
        user = User(name="Ada", address=Address(street="Main", city="Paris"))
        errors = errors_for(user)
        assert fields_of(errors) == ["address"]
        assert errors[0].code == "BLOCKED_STREET"

    def test_struct_validator_runs_after_field_checks(self) -> None:
        CustomValidatorRegistry.register_struct_validator(
            Booking, lambda b: [FieldError(field="", message="always")]
        )
        errors = errors_for(Booking())
        assert fields_of(errors) == ["root"]


class TestAlternatives:
    def test_either_alternative_passes(self) -> None:
        assert errors_for(Endpoint(contact="ada@example.com")) == []
        assert errors_for(Endpoint(contact="https://example.com")) == []

    def test_failure_reports_expression(self) -> None:
        errors = errors_for(Endpoint(contact="ftp://example.com"))
        assert [(e.field, e.code, e.message) for e in errors] == [
            ("contact", "OR_CONSTRAINT_FAILED", "must match one of: email|url")
        ]

    def test_alternatives_after_dive(self) -> None:
        @dataclass
        class Inbox:
            senders: list[str] = field(
                default_factory=list, metadata={"validate": "dive,required,email|hostname"}
            )

        errors = errors_for(Inbox(senders=["ada@example.com", "mail.example.com", "", "a b"]))
        assert [(e.field, e.code) for e in errors] == [
            ("senders[2]", "REQUIRED"),
            ("senders[3]", "OR_CONSTRAINT_FAILED"),
        ]


class TestPartial:
    """Only the selected top-level fields are checked; ``required`` becomes a zero check."""

    def validator(self) -> RecordValidator:
        return RecordValidator(compile_record(Patch))

    def test_unselected_fields_are_ignored(self) -> None:
        assert self.validator().validate_partial(Patch(title="Draft"), ["title"]) == []

    def test_selected_required_field_must_be_set(self) -> None:
        errors = self.validator().validate_partial(Patch(), ["title"])
        assert [(e.field, e.code) for e in errors] == [("title", "REQUIRED")]

    def test_selection_by_wire_name(self) -> None:
        errors = self.validator().validate_partial(Patch(owner="nope"), ["ownerEmail"])
        assert [(e.field, e.code) for e in errors] == [("owner", "INVALID_EMAIL")]

    def test_nested_record_is_validated_in_full(self) -> None:
        patch = Patch(address=Address(city="P"))
        errors = self.validator().validate_partial(patch, ["address"])
        assert fields_of(errors) == ["address.street", "address.city"]

    def test_unknown_field_name(self) -> None:
        with pytest.raises(ValueError, match="Patch has no field\\(s\\): nickname"):
            self.validator().validate_partial(Patch(), ["title", "nickname"])

    def test_root_struct_validators_do_not_run(self) -> None:
        CustomValidatorRegistry.register_struct_validator(
            Booking, lambda b: [FieldError(field="", message="always")]
        )
        validator = RecordValidator(compile_record(Booking))
        assert validator.validate_partial(Booking(), ["start"]) == []
        assert fields_of(validator.validate(Booking())) == ["root"]

    def test_none_root(self) -> None:
        errors = self.validator().validate_partial(None, ["title"])
        assert [e.code for e in errors] == ["NIL_VALUE"]

    def test_except(self) -> None:
        validator = self.validator()
        assert validator.validate_except(Patch(title="Draft"), ["ownerEmail"]) == []
        errors = validator.validate_except(Patch(owner="nope"), ["address", "owner"])
        assert [(e.field, e.code) for e in errors] == [("title", "REQUIRED")]


@pytest.mark.parametrize("count", [0, 1, 5])
def test_tag_count_boundaries_pass(count: int) -> None:
    assert errors_for(User(name="Ada", tags=["ab"] * count)) == []
