"""Truncated HMAC-SHA256 tags.

Truncating to 16 bytes keeps Ids short while leaving 128 bits of forgery
resistance, see RFC 2104 section 5.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import constant_time, hashes, hmac

from truestamp_id.errors import AuthenticationError

TAG_LEN = 16
BLOCK_SIZE = hashes.SHA256.block_size  # 64 bytes


def sign(key: bytes, message: bytes, length: int = TAG_LEN) -> bytes:
    """Return the first *length* bytes of ``HMAC-SHA256(key, message)``."""
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(message)
    return h.finalize()[:length]


def verify(key: bytes, message: bytes, tag: bytes) -> None:
    """Recompute the tag over *message* and compare in constant time.

    Raises :class:`AuthenticationError` on any mismatch, including a tag of the
    wrong length.
    """
    expected = sign(key, message)
    if not constant_time.bytes_eq(expected, tag):
        raise AuthenticationError()
