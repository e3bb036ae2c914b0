"""Flat proto3 messages built at runtime with the protobuf library.

A :class:`MessageSchema` turns a list of :class:`WireField` entries into a
``FileDescriptorProto``, registers it in a private descriptor pool and asks
``message_factory`` for the message class. Serialization is deterministic:
fields in ascending field-number order with proto3 defaults (``0``, ``b""``)
omitted.

Decoding is stricter than plain ``ParseFromString``. The parsed message must
carry no unknown fields and must re-serialize to exactly the input bytes, so
duplicate fields, explicit defaults and over-long varints are all rejected
and every message has a single encoding.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, Message

from truestamp_id.errors import StructuralError

UINT64 = descriptor_pb2.FieldDescriptorProto.TYPE_UINT64
BYTES = descriptor_pb2.FieldDescriptorProto.TYPE_BYTES

_PACKAGE = "truestamp_id"


@dataclass(frozen=True, slots=True)
class WireField:
    number: int
    name: str
    type: int

    @property
    def default(self) -> int | bytes:
        return 0 if self.type == UINT64 else b""


def _message_class(name: str, fields: tuple[WireField, ...]) -> type[Message]:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=f"{_PACKAGE}/{name.lower()}.proto",
        package=_PACKAGE,
        syntax="proto3",
    )
    message_proto = file_proto.message_type.add(name=name)
    for f in fields:
        message_proto.field.add(
            name=f.name,
            number=f.number,
            type=f.type,
            label=descriptor_pb2.FieldDescriptorProto.LABEL_OPTIONAL,
        )
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return message_factory.GetMessageClass(pool.FindMessageTypeByName(f"{_PACKAGE}.{name}"))


class MessageSchema:
    """One flat proto3 message type and its strict codec."""

    def __init__(self, name: str, *fields: WireField) -> None:
        numbers = [f.number for f in fields]
        if not numbers or numbers != sorted(set(numbers)) or numbers[0] < 1:
            raise ValueError("field numbers must be unique, positive and ascending")
        for f in fields:
            if f.type not in (UINT64, BYTES):
                raise ValueError(f"unsupported field type {f.type} for {f.name}")
        self.name = name
        self.fields = fields
        self.message_class = _message_class(name, fields)

    def encode(self, values: Mapping[str, int | bytes]) -> bytes:
        message = self.message_class(**{f.name: values.get(f.name, f.default) for f in self.fields})
        return message.SerializeToString(deterministic=True)

    def decode(self, data: bytes) -> dict[str, Any]:
        message = self.message_class()
        try:
            message.ParseFromString(data)
        except DecodeError as exc:
            raise StructuralError(f"malformed {self.name} message ({exc})") from None
        size = message.ByteSize()
        message.DiscardUnknownFields()
        if message.ByteSize() != size:
            raise StructuralError(f"unknown field in {self.name} message")
        if message.SerializeToString(deterministic=True) != bytes(data):
            raise StructuralError(f"non-canonical {self.name} message")
        return {f.name: getattr(message, f.name) for f in self.fields}

    def __repr__(self) -> str:
        return f"MessageSchema({self.name!r}, fields={len(self.fields)})"
