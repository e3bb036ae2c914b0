"""Public encode/decode entry points.

The format of an Id string is recognised from its shape: text Ids always
contain ``_``, which is outside the base32 alphabet of compact Ids. The format
of the fields passed to :func:`encode` comes from their model type, an explicit
``format=`` argument, or (for plain mappings) the presence of a ``ulid`` key.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from truestamp_id.config import IdSettings
from truestamp_id.errors import IdError, StructuralError
from truestamp_id.formats.base import IdCodec, IdFormat
from truestamp_id.formats.compact import CompactIdCodec
from truestamp_id.formats.text import SEPARATOR, TextIdCodec
from truestamp_id.schemas import CompactIdFields, TextIdFields

logger = logging.getLogger(__name__)

_CODEC_TYPES: dict[IdFormat, type[IdCodec[Any, Any]]] = {
    IdFormat.COMPACT: CompactIdCodec,
    IdFormat.TEXT: TextIdCodec,
}


def make_codec(fmt: IdFormat | str, settings: IdSettings | None = None) -> IdCodec[Any, Any]:
    """Create a codec for *fmt* with explicit *settings* (env-driven when omitted)."""
    return _CODEC_TYPES[IdFormat(fmt)](settings)


@functools.cache
def _shared_codec(fmt: IdFormat) -> IdCodec[Any, Any]:
    return make_codec(fmt)


def get_codec(fmt: IdFormat | str) -> IdCodec[Any, Any]:
    """Return the shared default codec for *fmt*. Codecs hold no key material."""
    # "compact" and IdFormat.COMPACT hash equal but cache under different keys
    return _shared_codec(IdFormat(fmt))


def detect_format(id: str) -> IdFormat:
    """Return the format of the Id string *id* from its shape alone."""
    if not isinstance(id, str):
        raise StructuralError("Id must be a string")
    return IdFormat.TEXT if SEPARATOR in id else IdFormat.COMPACT


def _fields_format(fields: BaseModel | Mapping[str, Any], fmt: IdFormat | str | None) -> IdFormat:
    if fmt is not None:
        return IdFormat(fmt)
    if isinstance(fields, CompactIdFields):
        return IdFormat.COMPACT
    if isinstance(fields, TextIdFields):
        return IdFormat.TEXT
    if isinstance(fields, Mapping) and "ulid" in fields:
        return IdFormat.TEXT
    return IdFormat.COMPACT


def encode(
    fields: BaseModel | Mapping[str, Any],
    key: Any,
    include_prefix: bool | None = None,
    *,
    format: IdFormat | str | None = None,
) -> str:
    """Encode *fields* into an authenticated Id string.

    *key* is 64 raw bytes for compact Ids and a 32-64 byte hex string for text
    Ids. *include_prefix* toggles the ``truestamp`` literal on compact Ids and
    defaults to :attr:`IdSettings.include_prefix`. Text Ids always start with
    ``T``.

    Raises ``MissingKeyError``, ``InvalidKeyLengthError`` or
    ``IdValidationError`` before doing any cryptographic work.
    """
    codec = get_codec(_fields_format(fields, format))
    return codec.encode(fields, key, include_prefix=include_prefix)


def decode(id: str, key: Any, *, envelope_hash: str | None = None) -> BaseModel:
    """Verify *id* with *key* and return its fields.

    Text Ids additionally need the *envelope_hash* they were issued for.

    Raises ``MissingKeyError``, ``InvalidKeyLengthError``, ``StructuralError``,
    ``IdValidationError`` or ``AuthenticationError``.
    """
    codec = get_codec(detect_format(id))
    if codec.binding_model is None:
        if envelope_hash is not None:
            raise TypeError(f"{codec.format} Ids do not take an envelope hash")
        return codec.decode(id, key)
    binding = {} if envelope_hash is None else {"envelope_hash": envelope_hash}
    return codec.decode(id, key, **binding)


def decode_unsafely(id: str) -> BaseModel:
    """Decode *id* WITHOUT verifying its tag.

    Only the structure is checked and only fields that do not depend on the
    tag are returned (no record pointer, no envelope hash). Useful for
    inspection, never for trust decisions.
    """
    return get_codec(detect_format(id)).decode_unsafely(id)


def is_valid(id: str, key: Any, *, envelope_hash: str | None = None) -> bool:
    """Return True when *id* decodes and verifies. Never raises."""
    try:
        decode(id, key, envelope_hash=envelope_hash)
    except (IdError, TypeError) as exc:
        logger.debug("is_valid: %s", type(exc).__name__)
        return False
    return True


def is_valid_unsafely(id: str) -> bool:
    """Return True when *id* is structurally valid. The tag is NOT checked. Never raises."""
    try:
        decode_unsafely(id)
    except (IdError, TypeError) as exc:
        logger.debug("is_valid_unsafely: %s", type(exc).__name__)
        return False
    return True
