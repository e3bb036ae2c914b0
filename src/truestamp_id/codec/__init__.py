"""Byte-level building blocks: wire format, compression, tags and base32."""

from truestamp_id.codec.base32 import b32decode, b32encode
from truestamp_id.codec.compression import compress, decompress
from truestamp_id.codec.mac import TAG_LEN, sign, verify
from truestamp_id.codec.wire import MessageSchema, WireField

__all__ = [
    "TAG_LEN",
    "MessageSchema",
    "WireField",
    "b32decode",
    "b32encode",
    "compress",
    "decompress",
    "sign",
    "verify",
]
