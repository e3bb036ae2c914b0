"""Text Ids: underscore-delimited fields with an uppercase hex HMAC tag.

Layout::

    T{version}{test}_{ulid}_{timestamp}_{TAG}
    T10_01FFZSB24K0QMTG2YBW3A6DYYR_1644772755000000_4DD8AF9A28124A497A2D67A54690AC5B

The tag is ``HMAC-SHA256(key, "{base}_{envelope_hash}")[:16]`` where ``base`` is
everything before the last separator. The envelope hash is bound by the tag
but never embedded, so decoding needs the same envelope hash again. Trusting
that envelope hash is the caller's job.

The HMAC key is a hex string for 32 to 64 bytes of key material. The HMAC is
keyed with the UTF-8 text of that string, which is how every Id of this
layout has been issued.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from truestamp_id.errors import (
    FieldError,
    IdValidationError,
    InvalidKeyLengthError,
    MissingKeyError,
    StructuralError,
)
from truestamp_id.formats.base import IdCodec, IdFormat, ParsedId
from truestamp_id.schemas import EnvelopeHash, TextIdFields, UnverifiedTextIdFields

PREFIX = "T"
SEPARATOR = "_"
KEY_MIN_BYTES = 32
KEY_MAX_BYTES = 64

_HEX_KEY = re.compile(r"[0-9a-fA-F]+")
_HEAD = re.compile(r"T1[01]")
_ULID = re.compile(r"[0-9A-HJKMNP-TV-Z]{26}")
_TIMESTAMP = re.compile(r"[0-9]{16}")
_TAG = re.compile(r"[0-9A-F]{32}")

# (name, pattern) for each segment, in order
_SEGMENTS = (
    ("head", _HEAD),
    ("ulid", _ULID),
    ("timestamp", _TIMESTAMP),
    ("tag", _TAG),
)


class EnvelopeBinding(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)

    envelope_hash: EnvelopeHash = Field(..., description="Hex hash of the authenticated envelope.")


def _split(text: str) -> list[str]:
    if not isinstance(text, str):
        raise StructuralError("Id must be a string")
    parts = text.split(SEPARATOR)
    if len(parts) != len(_SEGMENTS):
        raise StructuralError(f"expected {len(_SEGMENTS)} segments, found {len(parts)}")
    for (name, pattern), part in zip(_SEGMENTS, parts, strict=True):
        if not pattern.fullmatch(part):
            raise StructuralError(f"malformed {name} segment {part!r}")
    return parts


class TextIdCodec(IdCodec[TextIdFields, UnverifiedTextIdFields]):
    format = IdFormat.TEXT
    fields_model = TextIdFields
    unverified_model = UnverifiedTextIdFields
    binding_model = EnvelopeBinding

    def check_key(self, key: Any) -> bytes:
        if key is None or key == "":
            raise MissingKeyError()
        if not isinstance(key, str):
            raise TypeError(f"text Id keys must be hex strings, not {type(key).__name__}")
        if len(key) % 2 or not KEY_MIN_BYTES * 2 <= len(key) <= KEY_MAX_BYTES * 2:
            raise InvalidKeyLengthError(
                f"{KEY_MIN_BYTES}-{KEY_MAX_BYTES} hex-encoded bytes", len(key) // 2
            )
        if not _HEX_KEY.fullmatch(key):
            raise IdValidationError([FieldError("key", "pattern", "Key must be hex encoded")])
        return key.encode("utf-8")

    def canonicalize(self, fields: TextIdFields) -> bytes:
        base = SEPARATOR.join(
            (
                f"{PREFIX}{fields.version}{1 if fields.test else 0}",
                fields.ulid,
                str(fields.timestamp),
            )
        )
        return base.encode("ascii")

    def decanonicalize(self, body: bytes) -> dict[str, Any]:
        head, ulid, timestamp = body.decode("ascii").split(SEPARATOR)
        return {
            "version": int(head[1]),
            "test": head[2] == "1",
            "ulid": ulid,
            "timestamp": int(timestamp),
        }

    def authenticated_message(self, body: bytes, binding: Mapping[str, Any]) -> bytes:
        return body + SEPARATOR.encode() + binding["envelope_hash"].encode("ascii")

    def render(self, parsed: ParsedId, *, include_prefix: bool) -> str:
        return f"{parsed.body.decode('ascii')}{SEPARATOR}{parsed.tag.hex().upper()}"

    def parse(self, text: str) -> ParsedId:
        head, ulid, timestamp, tag = _split(text)
        body = SEPARATOR.join((head, ulid, timestamp))
        return ParsedId(body=body.encode("ascii"), tag=bytes.fromhex(tag))
