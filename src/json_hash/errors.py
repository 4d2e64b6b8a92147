"""Exception hierarchy for :mod:`json_hash`."""

from __future__ import annotations


class JsonHashError(Exception):
    """Base class for every error raised by json_hash."""


class UnsupportedTypeError(JsonHashError, TypeError):
    """Raised when a tree contains a value that is not a JSON type."""

    def __init__(self, value: object) -> None:
        self.type_name = type(value).__name__
        super().__init__(f"Unsupported type: {self.type_name}")


class InvalidNumberError(JsonHashError, ValueError):
    """Raised for NaN and infinite floats, which have no JSON encoding."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(f"Unsupported number: {value!r}")


class DigestUnavailableError(JsonHashError, RuntimeError):
    """Raised when SHA-256 cannot be obtained from :mod:`hashlib`."""


class MaxDepthExceededError(JsonHashError, RecursionError):
    """Raised when a tree nests deeper than the configured ``max_depth``."""

    def __init__(self, path: str, max_depth: int) -> None:
        self.path = path
        self.max_depth = max_depth
        super().__init__(
            f"Maximum nesting depth of {max_depth} exceeded at '{path or '/'}'"
        )


class HashValidationError(JsonHashError):
    """Base class for validation failures. ``path`` is slash separated."""

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)


class MissingHashError(HashValidationError):
    """An object in the validated tree has no ``_hash`` field."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Hash at '{path or '/'}' is missing.", path)


class HashMismatchError(HashValidationError):
    """An object's stored ``_hash`` differs from the recomputed one."""

    def __init__(self, path: str, expected: str, actual: object) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Hash at '{path or '/'}' is wrong: expected {expected!r}, got {actual!r}.",
            path,
        )
