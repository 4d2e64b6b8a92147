"""Environment-backed settings primitives for :mod:`json_hash`."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["JsonHashSettings", "get_settings"]


class JsonHashSettings(BaseSettings):
    """Expose environment-derived configuration knobs for json_hash.

    Every attribute maps to a documented environment variable and defaults to
    ``None`` (meaning "not set") when the variable is absent or malformed, so
    that lower-priority sources keep their values.

    Attributes:
        hash_length: Digest length override (``JSON_HASH_LENGTH``).
        floating_point_precision: Float precision override
            (``JSON_HASH_PRECISION``).
        update_existing_hashes: Whether to overwrite present hashes
            (``JSON_HASH_UPDATE_EXISTING``).
        recursive: Whether to descend into hashed sub-objects
            (``JSON_HASH_RECURSIVE``).
        max_depth: Nesting limit override (``JSON_HASH_MAX_DEPTH``).
        config_path: Explicit configuration file (``JSON_HASH_CONFIG_PATH``).
        log_level: Default log level for the command line
            (``JSON_HASH_LOG_LEVEL``).
    """

    hash_length: int | None = Field(default=None, alias="JSON_HASH_LENGTH")
    floating_point_precision: int | None = Field(
        default=None, alias="JSON_HASH_PRECISION"
    )
    update_existing_hashes: bool | None = Field(
        default=None, alias="JSON_HASH_UPDATE_EXISTING"
    )
    recursive: bool | None = Field(default=None, alias="JSON_HASH_RECURSIVE")
    max_depth: int | None = Field(default=None, alias="JSON_HASH_MAX_DEPTH")
    config_path: str | None = Field(default=None, alias="JSON_HASH_CONFIG_PATH")
    log_level: str = Field(default="WARNING", alias="JSON_HASH_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator("hash_length", "floating_point_precision", "max_depth", mode="before")
    @classmethod
    def _parse_optional_int(cls, value: object) -> int | None:
        """Parse optional integer fields while tolerating malformed input.

        Args:
            value: Raw environment value.

        Returns:
            Parsed integer when conversion succeeds, otherwise ``None``.
        """

        if value is None:
            return None
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return None
        return None

    @field_validator("update_existing_hashes", "recursive", mode="before")
    @classmethod
    def _parse_optional_bool(cls, value: object) -> bool | None:
        """Parse optional boolean flags; unknown spellings count as unset."""

        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"true", "1", "yes", "on"}:
                return True
            if lowered in {"false", "0", "no", "off"}:
                return False
        return None

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip().upper()
        return "WARNING"


def get_settings() -> JsonHashSettings:
    """Return a :class:`JsonHashSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return JsonHashSettings()
