"""Verification of hashed documents.

The validator recomputes every hash of a document and compares the result
with the stored ``_hash`` fields, walking both trees side by side from the
root. Failures are reported top-down, so the first one is always the
outermost object whose content no longer matches its hash.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from .config_loader.models import HashConfig
from .errors import HashMismatchError, HashValidationError, MissingHashError
from .types import HASH_KEY, JsonArray, JsonObject
from .walker import TreeWalker

logger = logging.getLogger(__name__)

__all__ = ["ValidationResult", "check", "iter_failures", "validate"]


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Outcome of validating one document.

    Attributes:
        error: The first failure found, or ``None`` for a valid document.
    """

    error: HashValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def path(self) -> str | None:
        return None if self.error is None else self.error.path

    @property
    def expected(self) -> str | None:
        if isinstance(self.error, HashMismatchError):
            return self.error.expected
        return None

    @property
    def actual(self) -> object:
        if isinstance(self.error, HashMismatchError):
            return self.error.actual
        return None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable summary of the result."""

        return {
            "valid": self.ok,
            "path": self.path,
            "expected": self.expected,
            "actual": self.actual,
        }


def _reference_tree(tree: JsonObject, config: HashConfig) -> JsonObject:
    reference_config = config.model_copy(
        update={"update_existing_hashes": True, "recursive": True}
    )
    return TreeWalker(reference_config).apply(tree, in_place=False)


def iter_failures(tree: JsonObject, config: HashConfig) -> Iterator[HashValidationError]:
    """Yield every hash failure of ``tree``, depth-first and left to right.

    A missing hash is reported for an object without ``_hash``; its
    descendants are still checked.
    """

    expected = _reference_tree(tree, config)
    yield from _compare_object(tree, expected, "")


def _compare_object(
    actual: JsonObject, expected: JsonObject, path: str
) -> Iterator[HashValidationError]:
    if HASH_KEY not in actual:
        yield MissingHashError(path)
    elif actual[HASH_KEY] != expected[HASH_KEY]:
        yield HashMismatchError(path, expected[HASH_KEY], actual[HASH_KEY])

    for key, value in actual.items():
        if key == HASH_KEY:
            continue
        if isinstance(value, dict):
            yield from _compare_object(value, expected[key], f"{path}/{key}")
        elif isinstance(value, list):
            yield from _compare_list(value, expected[key], f"{path}/{key}")


def _compare_list(
    actual: JsonArray, expected: JsonArray, path: str
) -> Iterator[HashValidationError]:
    for index, element in enumerate(actual):
        if isinstance(element, dict):
            yield from _compare_object(element, expected[index], f"{path}/{index}")
        elif isinstance(element, list):
            yield from _compare_list(element, expected[index], f"{path}/{index}")


def validate(tree: JsonObject, config: HashConfig) -> None:
    """Raise the first hash failure of ``tree``.

    Raises:
        MissingHashError: If an object has no ``_hash``.
        HashMismatchError: If a stored hash differs from the recomputed one.
    """

    for failure in iter_failures(tree, config):
        logger.info(
            "Hash validation failed",
            extra={
                "hash_path": failure.path or "/",
                "expected": getattr(failure, "expected", None),
                "actual": getattr(failure, "actual", None),
            },
        )
        raise failure


def check(tree: JsonObject, config: HashConfig) -> ValidationResult:
    """Validate ``tree`` and return the outcome instead of raising."""

    try:
        validate(tree, config)
    except HashValidationError as exc:
        return ValidationResult(error=exc)
    return ValidationResult()
