"""Type definitions for JSON trees handled by :mod:`json_hash`."""

from __future__ import annotations

from typing import Final, TypeAlias, Union

JsonScalar: TypeAlias = Union[str, int, float, bool, None]
JsonValue: TypeAlias = Union[JsonScalar, list["JsonValue"], dict[str, "JsonValue"]]
JsonObject: TypeAlias = dict[str, JsonValue]
JsonArray: TypeAlias = list[JsonValue]

HASH_KEY: Final = "_hash"
"""Reserved field that carries each object's digest."""
