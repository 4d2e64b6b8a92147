"""Public facade for hashing and validating JSON documents."""

from __future__ import annotations

import json
from typing import Any

from . import validator
from .config_loader import load_config, with_overrides
from .config_loader.models import HashConfig
from .digest import calc_hash
from .errors import UnsupportedTypeError
from .settings import JsonHashSettings
from .types import JsonObject
from .validator import ValidationResult
from .walker import TreeWalker, copy_json

__all__ = ["JsonHash"]


class JsonHash:
    """Add deterministic, structural ``_hash`` fields to JSON documents.

    Every object in a document receives a ``_hash`` computed from its own
    fields, with child objects contributing their hash instead of their
    content. Changing any value therefore changes the hash of its object and
    of all enclosing objects, while sibling objects keep theirs.

    Args:
        config: Hashing parameters. Defaults to :class:`HashConfig` defaults
            (22 character hashes, 10 fractional digits).
        **overrides: Individual :class:`HashConfig` fields that replace the
            values of ``config``.

    Example:
        >>> JsonHash().apply_to({"key": "value"})["_hash"]
        '5Dq88zdSRIOcAS-WM_lYYt'
    """

    def __init__(self, config: HashConfig | None = None, **overrides: Any) -> None:
        self._config = with_overrides(config or HashConfig(), overrides)
        self._walker = TreeWalker(self._config)

    @classmethod
    def from_settings(
        cls, settings: JsonHashSettings | None = None, *, path: str | None = None
    ) -> JsonHash:
        """Build an instance from environment variables and config files."""

        return cls(load_config(path, settings=settings))

    @property
    def config(self) -> HashConfig:
        return self._config

    @property
    def hash_length(self) -> int:
        return self._config.hash_length

    @property
    def floating_point_precision(self) -> int:
        return self._config.floating_point_precision

    def apply_to(self, json_obj: JsonObject, in_place: bool = False) -> JsonObject:
        """Write ``_hash`` into every object of ``json_obj``.

        With ``in_place=False`` (the default) the input is deep-copied first
        and never modified; with ``in_place=True`` the input itself is
        mutated and returned.
        """

        return self._walker.apply(json_obj, in_place=in_place)

    def apply_to_string(self, json_string: str) -> str:
        """Hash a JSON document given as text and return it as compact text."""

        data = json.loads(json_string)
        if not isinstance(data, dict):
            raise UnsupportedTypeError(data)
        self.apply_to(data, in_place=True)
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    def calc_hash(self, text: str) -> str:
        """Return the configured-length digest of ``text``."""

        return calc_hash(text, self._config.hash_length)

    def copy_json(self, json_obj: JsonObject) -> JsonObject:
        """Return a deep copy of ``json_obj``, rejecting non-JSON values."""

        return copy_json(json_obj, max_depth=self._config.max_depth)

    def validate(self, json_obj: JsonObject) -> None:
        """Raise the first missing or wrong hash found in ``json_obj``.

        Raises:
            MissingHashError: If an object has no ``_hash``.
            HashMismatchError: If a stored hash does not match its content.
        """

        validator.validate(json_obj, self._config)

    def check(self, json_obj: JsonObject) -> ValidationResult:
        """Validate ``json_obj`` and return the outcome instead of raising."""

        return validator.check(json_obj, self._config)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config!r})"
