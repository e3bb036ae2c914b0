"""truestamp-id - compact, authenticated identifiers.

An Id carries its own fields plus a truncated HMAC-SHA256 tag, so a holder of
the shared key can trust those fields without a lookup.
"""

from truestamp_id.api import (
    decode,
    decode_unsafely,
    detect_format,
    encode,
    get_codec,
    is_valid,
    is_valid_unsafely,
    make_codec,
)
from truestamp_id.config import IdSettings
from truestamp_id.errors import (
    AuthenticationError,
    FieldError,
    IdError,
    IdValidationError,
    InvalidKeyLengthError,
    MissingKeyError,
    StructuralError,
)
from truestamp_id.formats import CompactIdCodec, IdFormat, SelfCheckError, TextIdCodec
from truestamp_id.schemas import (
    CompactIdFields,
    TextIdFields,
    UnverifiedCompactIdFields,
    UnverifiedTextIdFields,
)
from truestamp_id.version import __version__

__all__ = [
    "AuthenticationError",
    "CompactIdCodec",
    "CompactIdFields",
    "FieldError",
    "IdError",
    "IdFormat",
    "IdSettings",
    "IdValidationError",
    "InvalidKeyLengthError",
    "MissingKeyError",
    "SelfCheckError",
    "StructuralError",
    "TextIdCodec",
    "TextIdFields",
    "UnverifiedCompactIdFields",
    "UnverifiedTextIdFields",
    "__version__",
    "decode",
    "decode_unsafely",
    "detect_format",
    "encode",
    "get_codec",
    "is_valid",
    "is_valid_unsafely",
    "make_codec",
]
