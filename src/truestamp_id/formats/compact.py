"""Compact Ids: protobuf body, zlib, truncated HMAC-SHA256, Crockford base32.

Layout of the printable Id::

    ["truestamp"] base32( tag[16] || zlib( protobuf(fields) ) )

The optional ``truestamp`` prefix is for humans only and is not covered by the
tag. The key is exactly 64 bytes, the SHA-256 block size.
"""

from __future__ import annotations

from typing import Any

from truestamp_id.codec import base32, compression, mac
from truestamp_id.codec.wire import BYTES, UINT64, MessageSchema, WireField
from truestamp_id.errors import InvalidKeyLengthError, MissingKeyError, StructuralError
from truestamp_id.formats.base import IdCodec, IdFormat, ParsedId
from truestamp_id.schemas import CompactIdFields, UnverifiedCompactIdFields
from truestamp_id.tables import ENVIRONMENTS, HASH_FUNCTIONS, REGIONS, CodeTable

PREFIX = "truestamp"
KEY_LEN = mac.BLOCK_SIZE

LAYOUT = MessageSchema(
    "CompactId",
    WireField(1, "timestamp", UINT64),
    WireField(2, "region", UINT64),
    WireField(3, "environment", UINT64),
    WireField(4, "short_hash", BYTES),
    WireField(5, "hash_algorithm", UINT64),
    WireField(6, "record_id", BYTES),
    WireField(7, "record_version", UINT64),
)


def _lookup(table: CodeTable, code: int) -> str:
    try:
        return table.name(code)
    except KeyError as exc:
        raise StructuralError(str(exc.args[0])) from None


class CompactIdCodec(IdCodec[CompactIdFields, UnverifiedCompactIdFields]):
    format = IdFormat.COMPACT
    fields_model = CompactIdFields
    unverified_model = UnverifiedCompactIdFields

    def check_key(self, key: Any) -> bytes:
        if key is None:
            raise MissingKeyError()
        if not isinstance(key, (bytes, bytearray, memoryview)):
            raise TypeError(f"compact Id keys must be bytes, not {type(key).__name__}")
        key = bytes(key)
        if len(key) != KEY_LEN:
            raise InvalidKeyLengthError(f"{KEY_LEN} bytes", len(key))
        return key

    def canonicalize(self, fields: CompactIdFields) -> bytes:
        message = LAYOUT.encode(
            {
                "timestamp": fields.timestamp,
                "region": REGIONS.code(fields.region),
                "environment": ENVIRONMENTS.code(fields.environment),
                "short_hash": bytes.fromhex(fields.short_hash),
                "hash_algorithm": HASH_FUNCTIONS.code(fields.hash_algorithm),
                "record_id": fields.record_id.encode("ascii"),
                "record_version": fields.record_version,
            }
        )
        return compression.compress(message, self.settings.compression_level)

    def decanonicalize(self, body: bytes) -> dict[str, Any]:
        values = LAYOUT.decode(compression.decompress(body, self.settings.max_decompressed_size))
        try:
            record_id = values["record_id"].decode("ascii")
        except UnicodeDecodeError:
            raise StructuralError("record_id is not ASCII") from None
        return {
            "timestamp": values["timestamp"],
            "region": _lookup(REGIONS, values["region"]),
            "environment": _lookup(ENVIRONMENTS, values["environment"]),
            "short_hash": values["short_hash"].hex(),
            "hash_algorithm": _lookup(HASH_FUNCTIONS, values["hash_algorithm"]),
            "record_id": record_id,
            "record_version": values["record_version"],
        }

    def render(self, parsed: ParsedId, *, include_prefix: bool) -> str:
        text = base32.b32encode(parsed.tag + parsed.body)
        return PREFIX + text if include_prefix else text

    def parse(self, text: str) -> ParsedId:
        if not isinstance(text, str):
            raise StructuralError("Id must be a string")
        if not text.isascii():
            raise StructuralError("Id must be ASCII")
        upper = text.upper()
        if upper.startswith(PREFIX.upper()):
            upper = upper[len(PREFIX) :]
        raw = base32.b32decode(upper)
        if len(raw) <= mac.TAG_LEN:
            raise StructuralError("Id too short")
        return ParsedId(body=raw[mac.TAG_LEN :], tag=raw[: mac.TAG_LEN])
