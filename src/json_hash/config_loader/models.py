"""Typed configuration model for :mod:`json_hash`."""

from __future__ import annotations

import sys

from pydantic import BaseModel, ConfigDict, Field, field_validator

from json_hash.digest import MAX_HASH_LENGTH

DEFAULT_MAX_DEPTH = 256

# The walkers use two stack frames per nesting level; the third is headroom.
_FRAMES_PER_LEVEL = 3


def max_depth_limit() -> int:
    """Return the largest ``max_depth`` the current recursion limit supports."""

    return sys.getrecursionlimit() // _FRAMES_PER_LEVEL


class HashConfig(BaseModel):
    """Immutable settings fixed when a :class:`~json_hash.hasher.JsonHash` is built.

    Attributes:
        hash_length: Number of base64url characters kept from each digest.
        floating_point_precision: Fractional digits kept when truncating floats.
        update_existing_hashes: Recompute objects that already carry a
            ``_hash``. When ``False`` such objects and everything below them
            are left as they are.
        recursive: Descend into nested objects that already carry a ``_hash``.
            When ``False`` those objects are treated as opaque leaves.
        max_depth: Deepest nesting level accepted before the walk aborts.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    hash_length: int = Field(
        default=22,
        ge=1,
        le=MAX_HASH_LENGTH,
        description="Characters kept from the base64url encoded digest.",
    )
    floating_point_precision: int = Field(
        default=10,
        ge=0,
        description="Fractional digits retained when canonicalizing floats.",
    )
    update_existing_hashes: bool = Field(
        default=True,
        description="Overwrite hashes that are already present.",
    )
    recursive: bool = Field(
        default=True,
        description="Walk into already hashed sub-objects.",
    )
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Maximum nesting depth of objects and arrays.",
    )

    @field_validator("max_depth")
    @classmethod
    def _fit_interpreter_stack(cls, value: int) -> int:
        """Reject depths the recursive walk could not reach without overflowing."""

        limit = max_depth_limit()
        if value > limit:
            raise ValueError(
                f"max_depth must be at most {limit} with the current recursion limit"
            )
        return value
