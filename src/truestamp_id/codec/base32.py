"""Crockford base32 for arbitrary byte strings.

Bits are packed most-significant first. A trailing partial group is padded
with zero bits on the right and no ``=`` padding is emitted. Decoding is
case-insensitive and strict. Non-ASCII text is refused before case folding,
and characters outside the alphabet and non-zero padding bits are rejected,
so every byte string has exactly one encoding.
"""

from __future__ import annotations

from truestamp_id.errors import StructuralError

ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_DECODE = {c: i for i, c in enumerate(ALPHABET)}


def b32encode(data: bytes) -> str:
    """Encode *data* as uppercase Crockford base32."""
    chars: list[str] = []
    acc = 0
    bits = 0
    for byte in data:
        acc = (acc << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            chars.append(ALPHABET[(acc >> bits) & 0x1F])
        acc &= (1 << bits) - 1
    if bits:
        chars.append(ALPHABET[(acc << (5 - bits)) & 0x1F])
    return "".join(chars)


def b32decode(text: str) -> bytes:
    """Decode Crockford base32, ignoring case. Only ASCII input is accepted."""
    if not text.isascii():
        raise StructuralError("base32 text must be ASCII")
    out = bytearray()
    acc = 0
    bits = 0
    for ch in text.upper():
        try:
            value = _DECODE[ch]
        except KeyError:
            raise StructuralError(f"invalid base32 character {ch!r}") from None
        acc = (acc << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((acc >> bits) & 0xFF)
            acc &= (1 << bits) - 1
    if bits >= 5 or acc:
        raise StructuralError("invalid base32 length or padding")
    return bytes(out)
