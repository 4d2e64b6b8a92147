"""Digest function: canonical string to fixed-length URL-safe hash."""

from __future__ import annotations

import base64
import hashlib
import logging

from .errors import DigestUnavailableError

logger = logging.getLogger(__name__)

MAX_HASH_LENGTH = 43
"""Characters in an unpadded base64url SHA-256 digest."""


def _sha256(data: bytes) -> bytes:
    try:
        hasher = hashlib.new("sha256")
    except ValueError as exc:
        logger.error("SHA-256 is not available in this interpreter")
        raise DigestUnavailableError("SHA-256 algorithm not available") from exc
    hasher.update(data)
    return hasher.digest()


def calc_hash(text: str, hash_length: int) -> str:
    """Return the first ``hash_length`` characters of the text's digest.

    The digest is SHA-256 over the UTF-8 bytes of ``text``, encoded as
    URL-safe base64 without padding. Lone surrogates, which ``json.loads``
    accepts from ``\\uXXXX`` escapes, are encoded as their three-byte form
    so that distinct inputs keep distinct digests.
    """

    encoded = base64.urlsafe_b64encode(_sha256(text.encode("utf-8", "surrogatepass")))
    return encoded.decode("ascii").rstrip("=")[:hash_length]
