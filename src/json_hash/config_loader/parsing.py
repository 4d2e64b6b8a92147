"""Parsing and transformation helpers for :mod:`json_hash.config_loader`."""

from __future__ import annotations

from collections.abc import Mapping

from json_hash.config_loader.models import HashConfig
from json_hash.settings import JsonHashSettings

_INT_KEYS: tuple[str, ...] = ("hash_length", "floating_point_precision", "max_depth")
_BOOL_KEYS: tuple[str, ...] = ("update_existing_hashes", "recursive")


def apply_environment_overrides(
    config: HashConfig, settings: JsonHashSettings
) -> HashConfig:
    """Apply environment-derived overrides to the configuration.

    Args:
        config: Base configuration instance.
        settings: Environment-derived settings.

    Returns:
        Configuration with environment overrides applied.
    """

    updates: dict[str, object] = {}
    for key in _INT_KEYS + _BOOL_KEYS:
        value = getattr(settings, key)
        if value is not None:
            updates[key] = value
    return with_overrides(config, updates)


def apply_structured_overrides(
    config: HashConfig, data: Mapping[str, object]
) -> HashConfig:
    """Apply overrides sourced from the ``hashing`` section of a config file.

    Args:
        config: Base configuration instance.
        data: Mapping parsed from configuration file.

    Returns:
        Configuration updated according to the provided mapping.
    """

    section = _expect_mapping(data.get("hashing"))
    if section is None:
        return config

    updates: dict[str, object] = {}
    for key in _INT_KEYS:
        int_value = _coerce_int(section.get(key))
        if int_value is not None:
            updates[key] = int_value
    for key in _BOOL_KEYS:
        bool_value = _coerce_bool(section.get(key))
        if bool_value is not None:
            updates[key] = bool_value
    return with_overrides(config, updates)


def with_overrides(config: HashConfig, updates: Mapping[str, object]) -> HashConfig:
    """Return a validated copy of ``config`` with ``updates`` applied.

    Raises:
        pydantic.ValidationError: If an updated value is out of range.
    """

    if not updates:
        return config
    return HashConfig.model_validate({**config.model_dump(), **updates})


def _coerce_int(value: object) -> int | None:
    """Parse an integer from arbitrary input.

    Args:
        value: Raw value.

    Returns:
        Parsed integer when conversion succeeds, otherwise ``None``.
    """

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


def _coerce_bool(value: object) -> bool | None:
    """Parse a boolean from arbitrary input.

    Args:
        value: Raw value.

    Returns:
        Parsed boolean when conversion succeeds, otherwise ``None``.
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes"}:
            return True
        if lowered in {"false", "0", "no"}:
            return False
    if isinstance(value, (int, float)):
        if value == 0:
            return False
        if value == 1:
            return True
    return None


def _expect_mapping(value: object) -> Mapping[str, object] | None:
    """Return the value when it is a mapping with string keys.

    Args:
        value: Raw configuration value.

    Returns:
        Mapping with string keys suitable for further parsing, or ``None``.
    """

    if not isinstance(value, Mapping):
        return None
    if not all(isinstance(key, str) for key in value.keys()):
        return None
    return value
