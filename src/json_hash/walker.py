"""Post-order tree walker that attaches ``_hash`` fields bottom-up."""

from __future__ import annotations

import logging
import math

from .canonical import canonical_string, is_basic_type
from .config_loader.models import DEFAULT_MAX_DEPTH, HashConfig
from .digest import calc_hash
from .errors import InvalidNumberError, MaxDepthExceededError, UnsupportedTypeError
from .types import HASH_KEY, JsonArray, JsonObject, JsonValue

logger = logging.getLogger(__name__)


def copy_json(tree: JsonObject, *, max_depth: int = DEFAULT_MAX_DEPTH) -> JsonObject:
    """Return a deep structural copy of ``tree``.

    Only dicts, lists and JSON scalars are copied; anything else raises
    :class:`UnsupportedTypeError`, and NaN or infinite floats raise
    :class:`InvalidNumberError`.
    """

    if not isinstance(tree, dict):
        raise UnsupportedTypeError(tree)
    return _copy_object(tree, "", 1, max_depth)


def copy_list(items: JsonArray, *, max_depth: int = DEFAULT_MAX_DEPTH) -> JsonArray:
    """Return a deep structural copy of ``items``."""

    if not isinstance(items, list):
        raise UnsupportedTypeError(items)
    return _copy_list(items, "", 1, max_depth)


def _check_depth(path: str, depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise MaxDepthExceededError(path, max_depth)


def _copy_object(obj: JsonObject, path: str, depth: int, max_depth: int) -> JsonObject:
    _check_depth(path, depth, max_depth)
    copy: JsonObject = {}
    for key, value in obj.items():
        if not isinstance(key, str):
            raise UnsupportedTypeError(key)
        copy[key] = _copy_value(value, f"{path}/{key}", depth, max_depth)
    return copy


def _copy_list(items: JsonArray, path: str, depth: int, max_depth: int) -> JsonArray:
    _check_depth(path, depth, max_depth)
    return [
        _copy_value(element, f"{path}/{index}", depth, max_depth)
        for index, element in enumerate(items)
    ]


def _copy_value(value: JsonValue, path: str, depth: int, max_depth: int) -> JsonValue:
    if isinstance(value, dict):
        return _copy_object(value, path, depth + 1, max_depth)
    if isinstance(value, list):
        return _copy_list(value, path, depth + 1, max_depth)
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidNumberError(value)
    if is_basic_type(value):
        return value
    raise UnsupportedTypeError(value)


class TreeWalker:
    """Hash every object of a tree, children before parents.

    Args:
        config: Hashing parameters and recursion controls.
    """

    def __init__(self, config: HashConfig) -> None:
        self._config = config

    @property
    def config(self) -> HashConfig:
        return self._config

    def apply(self, tree: JsonObject, *, in_place: bool = False) -> JsonObject:
        """Add or refresh ``_hash`` on every object of ``tree``.

        Args:
            tree: Root object.
            in_place: Mutate ``tree`` directly instead of hashing a deep copy.

        Returns:
            ``tree`` itself when ``in_place`` is true, otherwise the hashed copy.

        Raises:
            UnsupportedTypeError: If the tree holds a non-JSON value.
            InvalidNumberError: If the tree holds a NaN or infinite float.
            MaxDepthExceededError: If the tree nests deeper than ``max_depth``.

        Errors are raised before any ``_hash`` is written, so a failed
        in-place call leaves ``tree`` unchanged.
        """

        if not isinstance(tree, dict):
            raise UnsupportedTypeError(tree)
        checked = copy_json(tree, max_depth=self._config.max_depth)
        target = tree if in_place else checked
        self._hash_object(target, "", 1)
        return target

    def _hash_object(self, obj: JsonObject, path: str, depth: int) -> None:
        _check_depth(path, depth, self._config.max_depth)
        if HASH_KEY in obj and not self._config.update_existing_hashes:
            logger.debug("Keeping existing hash", extra={"path": path or "/"})
            return

        for key, value in obj.items():
            if key == HASH_KEY:
                continue
            if isinstance(value, dict):
                self._visit_child(value, f"{path}/{key}", depth + 1)
            elif isinstance(value, list):
                self._process_list(value, f"{path}/{key}", depth + 1)

        text = canonical_string(obj, self._config.floating_point_precision)
        obj[HASH_KEY] = calc_hash(text, self._config.hash_length)

    def _visit_child(self, obj: JsonObject, path: str, depth: int) -> None:
        if HASH_KEY in obj and not self._config.recursive:
            logger.debug("Treating hashed object as opaque", extra={"path": path})
            return
        self._hash_object(obj, path, depth)

    def _process_list(self, items: JsonArray, path: str, depth: int) -> None:
        _check_depth(path, depth, self._config.max_depth)
        for index, element in enumerate(items):
            if isinstance(element, dict):
                self._visit_child(element, f"{path}/{index}", depth + 1)
            elif isinstance(element, list):
                self._process_list(element, f"{path}/{index}", depth + 1)
