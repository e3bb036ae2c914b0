"""Byte-level codec tests: protobuf message schema, base32, zlib, tags."""

from __future__ import annotations

import zlib

import pytest

from tests.conftest import COMPACT_VECTOR_MESSAGE
from truestamp_id import AuthenticationError, StructuralError
from truestamp_id.codec import base32, compression, mac
from truestamp_id.codec.wire import BYTES, UINT64, MessageSchema, WireField
from truestamp_id.formats.compact import LAYOUT

# ---------------------------------------------------------------------------
# Message schema
# ---------------------------------------------------------------------------

_VECTOR_VALUES = {
    "timestamp": 1626751407,
    "region": 1,
    "environment": 1,
    "short_hash": bytes.fromhex("032080886bf3f264"),
    "hash_algorithm": 0x14,
    "record_id": b"epcseHP5bZfs07Ly29j72k",
    "record_version": 418,
}


class TestMessageSchema:
    def test_compact_vector_message(self):
        assert LAYOUT.encode(_VECTOR_VALUES) == COMPACT_VECTOR_MESSAGE
        assert LAYOUT.decode(COMPACT_VECTOR_MESSAGE) == _VECTOR_VALUES

    def test_defaults_are_omitted(self):
        schema = MessageSchema("Pair", WireField(1, "a", UINT64), WireField(2, "b", BYTES))
        assert schema.encode({"a": 0, "b": b""}) == b""
        assert schema.decode(b"") == {"a": 0, "b": b""}

    def test_large_varint(self):
        schema = MessageSchema("Wide", WireField(1, "n", UINT64))
        data = schema.encode({"n": (1 << 64) - 1})
        assert data == b"\x08" + b"\xff" * 9 + b"\x01"
        assert schema.decode(data) == {"n": (1 << 64) - 1}

    def test_unknown_field(self):
        with pytest.raises(StructuralError, match="unknown field"):
            LAYOUT.decode(b"\x48\x01")

    def test_wrong_wire_type(self):
        with pytest.raises(StructuralError, match="unknown field"):
            LAYOUT.decode(b"\x0a\x01\x00")

    @pytest.mark.parametrize(
        "data",
        [
            pytest.param(b"\x08\x01\x08\x02", id="duplicate"),
            pytest.param(b"\x08\x00", id="explicit-default"),
            pytest.param(b"\x08\x81\x00", id="overlong-varint"),
            pytest.param(b"\x10\x01\x08\x01", id="out-of-order"),
        ],
    )
    def test_non_canonical(self, data):
        with pytest.raises(StructuralError, match="non-canonical"):
            LAYOUT.decode(data)

    @pytest.mark.parametrize(
        "data",
        [
            pytest.param(b"\x22\x08\x00\x01", id="length-past-end"),
            pytest.param(b"\x08\x80\x80", id="truncated-varint"),
            pytest.param(b"\x08" + b"\x80" * 10 + b"\x01", id="varint-too-long"),
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(StructuralError, match="malformed"):
            LAYOUT.decode(data)

    def test_fields_must_be_ordered(self):
        with pytest.raises(ValueError):
            MessageSchema("Bad", WireField(2, "b", UINT64), WireField(1, "a", UINT64))

    def test_unsupported_field_type(self):
        with pytest.raises(ValueError):
            MessageSchema("Bad", WireField(1, "a", 9))


# ---------------------------------------------------------------------------
# Base32
# ---------------------------------------------------------------------------


class TestBase32:
    @pytest.mark.parametrize(
        ("raw", "text"),
        [
            (b"", ""),
            (b"\x00", "00"),
            (b"\xff", "ZW"),
            (b"\x00" * 5, "00000000"),
            (b"\xff" * 5, "ZZZZZZZZ"),
            (b"hello", "D1JPRV3F"),
        ],
    )
    def test_known(self, raw, text):
        assert base32.b32encode(raw) == text
        assert base32.b32decode(text) == raw

    def test_lowercase_input(self):
        assert base32.b32decode("d1jprv3f") == b"hello"

    @pytest.mark.parametrize("text", ["ſ0", "ß0", "D1JPRV3ｆ"])
    def test_non_ascii_never_case_folds_into_the_alphabet(self, text):
        with pytest.raises(StructuralError, match="ASCII"):
            base32.b32decode(text)

    @pytest.mark.parametrize("ch", ["I", "L", "O", "U", "=", "-", " "])
    def test_excluded_characters(self, ch):
        with pytest.raises(StructuralError):
            base32.b32decode("0" + ch)

    def test_non_zero_padding(self):
        with pytest.raises(StructuralError, match="padding"):
            base32.b32decode("ZZ")

    @pytest.mark.parametrize("length", [1, 3, 6])
    def test_impossible_lengths(self, length):
        with pytest.raises(StructuralError):
            base32.b32decode("0" * length)


# ---------------------------------------------------------------------------
# Compression
# ---------------------------------------------------------------------------


class TestCompression:
    def test_level_only_changes_size(self):
        data = COMPACT_VECTOR_MESSAGE * 4
        for level in range(10):
            assert compression.decompress(compression.compress(data, level)) == data

    def test_bad_level(self):
        with pytest.raises(ValueError):
            compression.compress(b"x", 10)

    def test_corrupt(self):
        with pytest.raises(StructuralError, match="corrupt"):
            compression.decompress(b"\x00\x01\x02")

    def test_truncated(self):
        stream = zlib.compress(COMPACT_VECTOR_MESSAGE, 9)
        with pytest.raises(StructuralError):
            compression.decompress(stream[:-3])

    def test_trailing_bytes(self):
        stream = zlib.compress(COMPACT_VECTOR_MESSAGE, 9)
        with pytest.raises(StructuralError, match="trailing"):
            compression.decompress(stream + b"\x00")

    def test_size_cap(self):
        stream = zlib.compress(b"\x00" * 4096, 9)
        with pytest.raises(StructuralError, match="beyond 1024"):
            compression.decompress(stream, 1024)


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


class TestMac:
    def test_rfc4231_case_2_truncated(self):
        tag = mac.sign(b"Jefe", b"what do ya want for nothing?")
        assert tag.hex() == "5bdcc146bf60754e6a042426089575c7"
        assert len(tag) == mac.TAG_LEN

    def test_verify(self):
        tag = mac.sign(b"k" * 64, b"message")
        mac.verify(b"k" * 64, b"message", tag)

    @pytest.mark.parametrize(
        "tag",
        [b"", bytes(16), bytes(32)],
    )
    def test_verify_rejects(self, tag):
        with pytest.raises(AuthenticationError):
            mac.verify(b"k" * 64, b"message", tag)

    def test_block_size(self):
        assert mac.BLOCK_SIZE == 64
