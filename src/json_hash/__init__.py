"""json_hash - deterministic structural hashes for JSON documents."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "JsonHash",
    "HashConfig",
    "ValidationResult",
    "JsonHashError",
    "UnsupportedTypeError",
    "InvalidNumberError",
    "MissingHashError",
    "HashMismatchError",
    "HashValidationError",
    "DigestUnavailableError",
    "MaxDepthExceededError",
]

if TYPE_CHECKING:
    from .config_loader.models import HashConfig
    from .errors import (
        DigestUnavailableError,
        HashMismatchError,
        HashValidationError,
        InvalidNumberError,
        JsonHashError,
        MaxDepthExceededError,
        MissingHashError,
        UnsupportedTypeError,
    )
    from .hasher import JsonHash
    from .validator import ValidationResult


def __getattr__(name: str) -> Any:
    """Lazily import modules so importing the package stays cheap."""

    module_map = {
        "JsonHash": "hasher",
        "HashConfig": "config_loader.models",
        "ValidationResult": "validator",
        "JsonHashError": "errors",
        "UnsupportedTypeError": "errors",
        "InvalidNumberError": "errors",
        "MissingHashError": "errors",
        "HashMismatchError": "errors",
        "HashValidationError": "errors",
        "DigestUnavailableError": "errors",
        "MaxDepthExceededError": "errors",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
