"""Id layouts sharing one validate/authenticate/render pipeline."""

from truestamp_id.formats.base import IdCodec, IdFormat, ParsedId, SelfCheckError
from truestamp_id.formats.compact import CompactIdCodec
from truestamp_id.formats.text import TextIdCodec

__all__ = [
    "CompactIdCodec",
    "IdCodec",
    "IdFormat",
    "ParsedId",
    "SelfCheckError",
    "TextIdCodec",
]
