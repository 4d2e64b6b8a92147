"""Public entry points for the :mod:`json_hash` configuration loader."""

from __future__ import annotations

from json_hash.config_loader.models import HashConfig
from json_hash.config_loader.parsing import (
    apply_environment_overrides,
    apply_structured_overrides,
    with_overrides,
)
from json_hash.config_loader.sources import load_structured_config
from json_hash.settings import JsonHashSettings, get_settings

__all__ = [
    "HashConfig",
    "load_config",
    "with_overrides",
]


def load_config(
    path: str | None = None, *, settings: JsonHashSettings | None = None
) -> HashConfig:
    """Load configuration from environment and optional file sources.

    File values take precedence over environment values, which take
    precedence over the :class:`HashConfig` defaults.

    Args:
        path: Optional explicit path to a configuration file. When omitted the
            loader inspects the environment and default search locations.
        settings: Optional pre-instantiated environment settings. When omitted
            :func:`json_hash.settings.get_settings` is used.

    Returns:
        Fully populated :class:`HashConfig` instance.
    """

    env_settings = settings or get_settings()
    base = apply_environment_overrides(HashConfig(), env_settings)
    structured = load_structured_config(path, env_settings)
    if structured is None:
        return base
    return apply_structured_overrides(base, structured)
