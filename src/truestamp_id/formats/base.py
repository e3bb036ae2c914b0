"""Shared Id pipeline: validate -> canonicalize -> authenticate -> render, and back.

A concrete format supplies the canonical body, the text rendering and the key
rules. Validation, tag computation, verification order and the encode
self-check live here once, for every format.

Decode order is fixed:

1. key presence and length
2. Id structure (prefix, alphabet, segment shape)
3. externally bound inputs (e.g. the envelope hash)
4. tag verification, constant time
5. payload decoding and field re-validation

Steps 1-3 fail before any HMAC is computed. Step 5 never runs for an Id whose
tag did not verify.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from truestamp_id.codec import mac
from truestamp_id.config import IdSettings
from truestamp_id.errors import IdError
from truestamp_id.schemas import FieldValidator, Validator

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=BaseModel)
U = TypeVar("U", bound=BaseModel)


class IdFormat(StrEnum):
    """Wire layouts. Values are stable identifiers, safe to persist."""

    COMPACT = "compact"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class ParsedId:
    """An Id split into its authenticated body and its tag."""

    body: bytes
    tag: bytes


class SelfCheckError(IdError):
    """Raised when a freshly encoded Id does not decode back to its fields."""


class IdCodec(ABC, Generic[F, U]):
    """Base class for one Id layout."""

    format: ClassVar[IdFormat]
    fields_model: ClassVar[type[BaseModel]]
    unverified_model: ClassVar[type[BaseModel]]
    # Fields authenticated by the tag but carried outside the Id.
    binding_model: ClassVar[type[BaseModel] | None] = None

    def __init__(
        self,
        settings: IdSettings | None = None,
        validator: Validator[F] | None = None,
    ) -> None:
        if settings is None:
            settings = IdSettings()
        self.settings = settings
        self.validator: Validator[F] = validator or FieldValidator(self.fields_model)  # type: ignore[arg-type]
        self._unverified = FieldValidator(self.unverified_model)
        self._binding = FieldValidator(self.binding_model) if self.binding_model else None

    # --- format hooks ---

    @abstractmethod
    def check_key(self, key: Any) -> bytes:
        """Return the HMAC key bytes or raise ``MissingKeyError``/``InvalidKeyLengthError``."""

    @abstractmethod
    def canonicalize(self, fields: F) -> bytes:
        """Return the deterministic body bytes for validated *fields*."""

    @abstractmethod
    def decanonicalize(self, body: bytes) -> dict[str, Any]:
        """Return raw field values embedded in *body* (unvalidated)."""

    @abstractmethod
    def render(self, parsed: ParsedId, *, include_prefix: bool) -> str:
        """Render body and tag as the printable Id."""

    @abstractmethod
    def parse(self, text: str) -> ParsedId:
        """Split a printable Id into body and tag, raising ``StructuralError``."""

    def authenticated_message(self, body: bytes, binding: Mapping[str, Any]) -> bytes:
        """Bytes covered by the tag. Defaults to the body alone."""
        return body

    # --- pipeline ---

    def _bound_values(self, fields: BaseModel) -> dict[str, Any]:
        if self.binding_model is None:
            return {}
        return {name: getattr(fields, name) for name in self.binding_model.model_fields}

    def _check_binding(self, binding: Mapping[str, Any]) -> dict[str, Any]:
        if self._binding is None:
            return {}
        return self._binding.validate(dict(binding)).model_dump()

    def encode(
        self,
        fields: F | Mapping[str, Any],
        key: Any,
        *,
        include_prefix: bool | None = None,
    ) -> str:
        """Validate *fields*, authenticate them with *key* and render the Id."""
        mac_key = self.check_key(key)
        valid = self.validator.validate(fields)
        if include_prefix is None:
            include_prefix = self.settings.include_prefix

        binding = self._bound_values(valid)
        body = self.canonicalize(valid)
        tag = mac.sign(mac_key, self.authenticated_message(body, binding))
        text = self.render(ParsedId(body, tag), include_prefix=include_prefix)

        if self.settings.self_check:
            try:
                decoded = self.decode(text, key, **binding)
            except IdError as exc:
                raise SelfCheckError(f"encoded {self.format} Id does not decode: {exc}") from exc
            if decoded != valid:
                raise SelfCheckError(f"encoded {self.format} Id decodes to different fields")
        return text

    def decode(self, text: str, key: Any, **binding: Any) -> F:
        """Verify *text* with *key* and return its fields."""
        try:
            mac_key = self.check_key(key)
            parsed = self.parse(text)
            bound = self._check_binding(binding)
            mac.verify(mac_key, self.authenticated_message(parsed.body, bound), parsed.tag)
            raw = self.decanonicalize(parsed.body)
            return self.validator.validate({**raw, **bound})
        except IdError as exc:
            logger.debug("rejected %s Id: %s", self.format, type(exc).__name__)
            raise

    def decode_unsafely(self, text: str) -> U:
        """Return the unauthenticated-safe fields of *text* WITHOUT checking its tag.

        Only structure is checked. Never base a trust decision on the result.
        """
        parsed = self.parse(text)
        raw = self.decanonicalize(parsed.body)
        subset = {name: raw[name] for name in self.unverified_model.model_fields}
        return self._unverified.validate(subset)  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(format={self.format.value!r})"
