"""Common test fixtures: keys, known-good fields and published vectors."""

from __future__ import annotations

import pytest

from truestamp_id import CompactIdFields, IdSettings, TextIdFields, make_codec

COMPACT_KEY = bytes.fromhex("deadbeef" * 16)
COMPACT_VECTOR = (
    "truestamp8V382DKSDZJ7093ARFAPQ6NEWXWDNRTRVXYB77ADG18R4MC9GDCT3893ZFSTE50D24HV3N42"
    "WKH593R0TEJAHD320DSSYJH3SCP778VCHD2WR043YR7QR"
)
COMPACT_VECTOR_FIELDS = {
    "timestamp": 1626751407,
    "region": "us-east-1",
    "environment": "production",
    "short_hash": "032080886bf3f264",
    "hash_algorithm": "sha3-512",
    "record_id": "epcseHP5bZfs07Ly29j72k",
    "record_version": 418,
}
# protobuf body of COMPACT_VECTOR, before compression
COMPACT_VECTOR_MESSAGE = bytes.fromhex(
    "08af83d98706100118012208032080886bf3f264281432166570637365485035625a667330374c"
    "7932396a37326b38a203"
)

TEXT_KEY = "deadc44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ENVELOPE_HASH = "beefc44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
TEXT_ULID = "01FFZSB24K0QMTG2YBW3A6DYYR"
TEXT_TIMESTAMP = 1644772755000000
TEXT_VECTOR = "T10_01FFZSB24K0QMTG2YBW3A6DYYR_1644772755000000_4DD8AF9A28124A497A2D67A54690AC5B"
TEXT_VECTOR_TEST = "T11_01FFZSB24K0QMTG2YBW3A6DYYR_1644772755000000_268129605CF9B597DBE4E7B71BCBCF37"


@pytest.fixture()
def compact_key() -> bytes:
    return COMPACT_KEY


@pytest.fixture()
def compact_fields() -> CompactIdFields:
    return CompactIdFields(**COMPACT_VECTOR_FIELDS)


@pytest.fixture()
def text_fields() -> TextIdFields:
    return TextIdFields(
        version=1,
        test=False,
        ulid=TEXT_ULID,
        timestamp=TEXT_TIMESTAMP,
        envelope_hash=ENVELOPE_HASH,
    )


@pytest.fixture()
def settings() -> IdSettings:
    """Settings that ignore any TRUESTAMP_ID_* variables of the host."""
    return IdSettings(
        _env_file=None,
        compression_level=9,
        include_prefix=True,
        self_check=True,
        max_decompressed_size=1024,
    )


@pytest.fixture()
def compact_codec(settings):
    return make_codec("compact", settings)


@pytest.fixture()
def text_codec(settings):
    return make_codec("text", settings)
