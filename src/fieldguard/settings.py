"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from fieldguard.models.fields import ExtraFields


class Settings(BaseSettings):
    """Process-wide defaults for fieldguard validators.

    Values are read from ``FIELDGUARD_*`` environment variables and from a
    ``.env`` file in the working directory.  Per-validator overrides go
    through :class:`fieldguard.service.validator.ValidatorOptions`.
    """

    model_config = SettingsConfigDict(
        env_prefix="FIELDGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Dataclass field metadata key holding the annotation string
    tag_name: str = "validate"
    # Metadata key holding the external (wire) field name
    wire_name_key: str = "json"

    # Presence handling: missing keys trigger required errors / defaults
    strict_missing_fields: bool = True
    # Undeclared input keys: ignore, forbid (decode error) or allow (kept)
    extra_fields: ExtraFields = ExtraFields.IGNORE

    # Input loader safety limits
    max_document_size: int = 5_000_000  # characters
    max_depth: int = 64
    max_node_count: int = 200_000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
