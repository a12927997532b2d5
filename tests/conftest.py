"""Shared test fixtures and sample record types for fieldguard."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, make_dataclass
from typing import Any

import pytest

from fieldguard.parser.loader import InputLoader
from fieldguard.registry import CustomValidatorRegistry
from fieldguard.service.validator import clear_validator_cache


@pytest.fixture(autouse=True)
def clean_registry() -> Iterator[None]:
    """Every test starts with no custom validators, aliases or cached validators."""
    CustomValidatorRegistry.reset()
    clear_validator_cache()
    yield
    CustomValidatorRegistry.reset()
    clear_validator_cache()


@pytest.fixture
def loader() -> InputLoader:
    return InputLoader()


# ---------------------------------------------------------------------------
# Sample record types
# ---------------------------------------------------------------------------


@dataclass
class Address:
    street: str = field(default="", metadata={"validate": "required"})
    city: str = field(default="", metadata={"validate": "required,min=2"})
    zip_code: str = field(default="", metadata={"validate": "regexp=^[0-9]{5}$", "json": "zipCode"})


@dataclass
class User:
    name: str = field(default="", metadata={"validate": "required,min=2"})
    email: str = field(default="", metadata={"validate": "email"})
    age: int = field(default=0, metadata={"validate": "gte=0,lte=150"})
    role: str = field(
        default="member", metadata={"validate": "default=member,oneof=admin member guest"}
    )
    tags: list[str] = field(default_factory=list, metadata={"validate": "max=5,dive,min=2"})
    address: Address | None = None


@dataclass
class Team:
    title: str = field(default="", metadata={"validate": "required"})
    members: list[User] = field(default_factory=list, metadata={"validate": "min=1"})


@dataclass
class Contacts:
    contacts: dict[str, str] = field(
        default_factory=dict, metadata={"validate": "dive,keys,min=3,endkeys,email"}
    )


@dataclass
class Scores:
    scores: dict[int, int] = field(
        default_factory=dict, metadata={"validate": "max=10,dive,keys,gte=1,endkeys,lte=100"}
    )


@dataclass
class Payment:
    method: str = field(default="", metadata={"validate": "required,oneof=card cash"})
    cash_amount: int = field(default=0, metadata={"validate": "excluded_if=method card"})
    card_number: str = field(default="", metadata={"validate": "required_if=method card"})


@dataclass
class Bounds:
    low: int = 0
    high: int = field(default=0, metadata={"validate": "gtefield=low"})


@dataclass
class Measurement:
    bounds: Bounds | None = None
    value: int = field(
        default=0, metadata={"validate": "gtefield=bounds.low,ltefield=bounds.high"}
    )


@dataclass
class TreeNode:
    label: str = field(default="", metadata={"validate": "required"})
    children: list[TreeNode] = field(default_factory=list, metadata={"validate": "max=3"})


@dataclass
class Job:
    name: str = field(default="", metadata={"validate": "required"})
    retries: int = field(
        default=0, metadata={"validate": "defaultUsingMethod=default_retries,gte=1"}
    )
    queue: str = field(default="", metadata={"validate": "defaultUsingMethod=default_queue"})

    @classmethod
    def default_retries(cls) -> tuple[int, str | None]:
        return 3, None

    @staticmethod
    def default_queue() -> tuple[str, str | None]:
        return "", "no queue configured"


@dataclass
class Booking:
    start: int = 0
    end: int = 0


# Two distinct record types sharing a class name
PointA = make_dataclass("Point", [("x", int, field(default=0, metadata={"validate": "gte=0"}))])
PointB = make_dataclass("Point", [("y", str, field(default="", metadata={"validate": "alpha"}))])


@dataclass
class Segment:
    start: PointA | None = None
    label: PointB | None = None


@dataclass
class Endpoint:
    """One field per string format; ``""`` is valid for all of them."""

    email: str = field(default="", metadata={"validate": "email"})
    url: str = field(default="", metadata={"validate": "url"})
    uri: str = field(default="", metadata={"validate": "uri"})
    uuid: str = field(default="", metadata={"validate": "uuid"})
    ipv4: str = field(default="", metadata={"validate": "ipv4"})
    ipv6: str = field(default="", metadata={"validate": "ipv6"})
    ip: str = field(default="", metadata={"validate": "ip"})
    hostname: str = field(default="", metadata={"validate": "hostname"})
    seen_at: str = field(default="", metadata={"validate": "datetime", "json": "seenAt"})
    contact: str = field(default="", metadata={"validate": "email|url"})


@dataclass
class Envelope:
    kind: str = field(default="", metadata={"validate": "required,oneof=ping pong"})
    extra: dict[str, Any] = field(default_factory=dict, metadata={"validate": "extra_fields"})


@dataclass
class Patch:
    """Partially updated resource: only some fields are sent at a time."""

    title: str = field(default="", metadata={"validate": "required,min=3"})
    owner: str = field(default="", metadata={"validate": "required,email", "json": "ownerEmail"})
    address: Address | None = None


SAMPLE_USER_JSON = """\
{
  "name": "Ada Lovelace",
  "email": "ada@example.com",
  "age": 36,
  "tags": ["math", "engines"],
  "address": {"street": "12 St James's Square", "city": "London", "zipCode": "12345"}
}
"""

SAMPLE_USER_YAML = """\
name: Ada Lovelace
email: ada@example.com
age: 36
tags:
  - math
  - engines
address:
  street: 12 St James's Square
  city: London
  zipCode: "12345"
"""
