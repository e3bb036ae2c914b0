"""zlib compression of the canonical payload."""

from __future__ import annotations

import zlib

from truestamp_id.errors import StructuralError

DEFAULT_LEVEL = 9
DEFAULT_MAX_SIZE = 1024


def compress(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """Return a zlib stream (RFC 1950) of *data*."""
    if not 0 <= level <= 9:
        raise ValueError("compression level must be between 0 and 9")
    return zlib.compress(data, level)


def decompress(data: bytes, max_size: int = DEFAULT_MAX_SIZE) -> bytes:
    """Inflate a complete zlib stream.

    Raises :class:`StructuralError` on corrupt or truncated input, trailing
    bytes after the stream, or output larger than *max_size*.
    """
    d = zlib.decompressobj()
    try:
        out = d.decompress(data, max_size)
    except zlib.error as exc:
        raise StructuralError(f"corrupt payload ({exc})") from None
    if not d.eof:
        if len(out) >= max_size:
            raise StructuralError(f"payload inflates beyond {max_size} bytes")
        raise StructuralError("truncated payload")
    if d.unused_data:
        raise StructuralError("trailing bytes after payload")
    return out
