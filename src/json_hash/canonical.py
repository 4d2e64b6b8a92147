"""Canonical representation of a single object's fields.

The canonical form of an object is the minimal JSON rendering of its direct
fields, sorted by key, in which:

* child objects are replaced by their ``_hash``;
* arrays are flattened, so object elements become their ``_hash`` and nested
  arrays are flattened the same way;
* floats are truncated (never rounded) to a fixed number of fractional
  digits, collapsing to an integer when no fractional digits remain.

The resulting string is the exact input of the digest function, so every
byte produced here is part of the hash format.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal

from .errors import InvalidNumberError, UnsupportedTypeError
from .types import HASH_KEY, JsonArray, JsonObject, JsonScalar

__all__ = [
    "canonical_fields",
    "canonical_string",
    "convert_basic_type",
    "encode_value",
    "flatten_list",
    "is_basic_type",
    "json_string",
    "truncate",
]


def is_basic_type(value: object) -> bool:
    """Return ``True`` for values that hash as themselves (after truncation)."""

    return value is None or isinstance(value, (str, bool, int, float))


def _decimal_text(value: float) -> str:
    """Render ``value`` as its shortest round-trip decimal, without exponent."""

    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def truncate(value: int | float, precision: int) -> int | float:
    """Cut ``value`` to ``precision`` fractional digits.

    Integers are returned unchanged. Floats are cut textually: digits past
    ``precision`` are dropped, trailing zeros are stripped, and a float with
    no remaining fractional digits becomes an ``int``.

    Args:
        value: Number to truncate.
        precision: Number of fractional digits to keep.

    Returns:
        The truncated number.

    Raises:
        InvalidNumberError: If ``value`` is NaN or infinite.
    """

    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        raise InvalidNumberError(value)

    integer, _, fraction = _decimal_text(value).partition(".")
    fraction = fraction[:precision].rstrip("0")
    if not fraction:
        return int(integer)
    return float(f"{integer}.{fraction}")


def convert_basic_type(value: object, precision: int) -> JsonScalar:
    """Return the hash contribution of a scalar value."""

    if isinstance(value, float):
        return truncate(value, precision)
    if is_basic_type(value):
        return value  # type: ignore[return-value]
    raise UnsupportedTypeError(value)


def flatten_list(items: JsonArray, precision: int) -> list[object]:
    """Return the hash contribution of an array."""

    flattened: list[object] = []
    for element in items:
        if isinstance(element, dict):
            flattened.append(element.get(HASH_KEY))
        elif isinstance(element, list):
            flattened.append(flatten_list(element, precision))
        else:
            flattened.append(convert_basic_type(element, precision))
    return flattened


def canonical_fields(obj: JsonObject, precision: int) -> dict[str, object]:
    """Map every non-``_hash`` field of ``obj`` to its hash contribution.

    Child objects must already carry their own ``_hash``.

    Returns:
        A new dict in the field order of ``obj``; :func:`json_string` sorts it.
    """

    fields: dict[str, object] = {}
    for key, value in obj.items():
        if not isinstance(key, str):
            raise UnsupportedTypeError(key)
        if key == HASH_KEY:
            continue
        if isinstance(value, dict):
            fields[key] = value.get(HASH_KEY)
        elif isinstance(value, list):
            fields[key] = flatten_list(value, precision)
        else:
            fields[key] = convert_basic_type(value, precision)
    return fields


def _quote(text: str) -> str:
    return '"' + text.replace('"', '\\"') + '"'


def encode_value(value: object) -> str:
    """Serialize one value of a canonical mapping."""

    if isinstance(value, str):
        return _quote(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidNumberError(value)
        return _decimal_text(value)
    if isinstance(value, list):
        return "[" + ",".join(encode_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        return json_string(value)
    raise UnsupportedTypeError(value)


def json_string(mapping: Mapping[str, object]) -> str:
    """Serialize ``mapping`` as compact JSON with sorted keys.

    Only double quotes are escaped inside strings; no other character is
    rewritten.
    """

    for key in mapping:
        if not isinstance(key, str):
            raise UnsupportedTypeError(key)
    parts = []
    for key in sorted(mapping):
        parts.append(f"{_quote(key)}:{encode_value(mapping[key])}")
    return "{" + ",".join(parts) + "}"


def canonical_string(obj: JsonObject, precision: int) -> str:
    """Return the digest input for ``obj``."""

    return json_string(canonical_fields(obj, precision))
