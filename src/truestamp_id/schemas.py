"""Pydantic field models and the field validator.

Every model is closed (``extra="forbid"``), strict and frozen. pydantic's
``ValidationError`` never leaves this module: :class:`FieldValidator`
collects every violation and re-raises them as an
:class:`~truestamp_id.errors.IdValidationError` whose constraint names follow
the JSON-schema vocabulary (``minLength``, ``maximum``, ``enum`` ...).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from truestamp_id.errors import FieldError, IdValidationError
from truestamp_id.tables import ENVIRONMENTS, HASH_FUNCTIONS, REGIONS, CodeTable

# --- domain bounds ---

COMPACT_TIMESTAMP_MIN = 1  # seconds; 0 would vanish as a proto3 default
COMPACT_TIMESTAMP_MAX = 2**31 - 1
RECORD_VERSION_MAX = 999_999_999
SHORT_HASH_LEN = 16
RECORD_ID_LEN = 22

TEXT_VERSION = 1
TEXT_TIMESTAMP_MIN = 1640995200000000  # 2022-01-01T00:00:00Z, microseconds
TEXT_TIMESTAMP_END = 4796668800000000  # 2122-01-01T00:00:00Z, exclusive

ULID_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"
ENVELOPE_HASH_PATTERN = r"^(?:[0-9a-fA-F]{2}){20,64}$"


def _member(table: CodeTable) -> BeforeValidator:
    def check(value: Any) -> Any:
        if isinstance(value, str) and value not in table:
            raise PydanticCustomError(
                "enum",
                "Unrecognized {label} {value}, expected one of: {names}",
                {"label": table.label, "value": repr(value), "names": ", ".join(table.names)},
            )
        return value

    return BeforeValidator(check)


def _upper(value: Any) -> Any:
    return value.upper() if isinstance(value, str) else value


Region = Annotated[str, _member(REGIONS)]
Environment = Annotated[str, _member(ENVIRONMENTS)]
HashAlgorithm = Annotated[str, _member(HASH_FUNCTIONS)]
ShortHash = Annotated[
    str,
    StringConstraints(min_length=SHORT_HASH_LEN, max_length=SHORT_HASH_LEN, pattern=r"^[0-9a-f]+$"),
]
RecordId = Annotated[
    str,
    StringConstraints(min_length=RECORD_ID_LEN, max_length=RECORD_ID_LEN, pattern=r"^[A-Za-z0-9]+$"),
]
RecordVersion = Annotated[int, Field(ge=0, le=RECORD_VERSION_MAX)]
CompactTimestamp = Annotated[int, Field(ge=COMPACT_TIMESTAMP_MIN, le=COMPACT_TIMESTAMP_MAX)]

TextVersion = Annotated[int, Field(ge=TEXT_VERSION, le=TEXT_VERSION)]
Ulid = Annotated[str, StringConstraints(pattern=ULID_PATTERN), BeforeValidator(_upper)]
TextTimestamp = Annotated[int, Field(ge=TEXT_TIMESTAMP_MIN, lt=TEXT_TIMESTAMP_END)]
EnvelopeHash = Annotated[str, StringConstraints(pattern=ENVELOPE_HASH_PATTERN)]


class _IdModel(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


class CompactIdFields(_IdModel):
    """Fields carried by a compact (binary, compressed) Id."""

    timestamp: CompactTimestamp = Field(..., description="Seconds since the Unix epoch.")
    region: Region = Field(..., description="Region name from the region table.")
    environment: Environment = Field(..., description="Environment name from the environment table.")
    short_hash: ShortHash = Field(..., description="First 8 bytes of the content hash, lowercase hex.")
    hash_algorithm: HashAlgorithm = Field(..., description="Multihash name of the content hash function.")
    record_id: RecordId = Field(..., description="22 character alphanumeric record pointer.")
    record_version: RecordVersion = Field(..., description="Record revision counter.")


class UnverifiedCompactIdFields(_IdModel):
    """The compact Id fields that are safe to show without verifying the tag."""

    timestamp: CompactTimestamp
    region: Region
    environment: Environment


class TextIdFields(_IdModel):
    """Fields carried by (and bound to) a delimited text Id."""

    version: TextVersion = Field(TEXT_VERSION, description="Layout version, always 1.")
    test: bool = Field(False, description="Whether the Id refers to test data.")
    ulid: Ulid = Field(..., description="Sortable unique identifier, uppercased.")
    timestamp: TextTimestamp = Field(..., description="Microseconds since the Unix epoch.")
    envelope_hash: EnvelopeHash = Field(
        ...,
        description="Hex hash of the envelope this Id authenticates. Not embedded in the Id.",
    )


class UnverifiedTextIdFields(_IdModel):
    """The text Id fields that are safe to show without verifying the tag."""

    version: TextVersion
    test: bool
    ulid: Ulid
    timestamp: TextTimestamp


# --- validation ---

M = TypeVar("M", bound=BaseModel)
M_co = TypeVar("M_co", bound=BaseModel, covariant=True)

# pydantic error type -> JSON-schema keyword
_CONSTRAINTS = {
    "missing": "required",
    "extra_forbidden": "additionalProperties",
    "string_too_short": "minLength",
    "string_too_long": "maxLength",
    "string_pattern_mismatch": "pattern",
    "greater_than_equal": "minimum",
    "greater_than": "exclusiveMinimum",
    "less_than_equal": "maximum",
    "less_than": "exclusiveMaximum",
    "int_type": "type",
    "int_from_float": "type",
    "string_type": "type",
    "bool_type": "type",
    "model_type": "type",
    "dict_type": "type",
    "enum": "enum",
}


def field_errors(exc: PydanticValidationError) -> list[FieldError]:
    """Translate a pydantic error into :class:`FieldError` entries."""
    out: list[FieldError] = []
    for err in exc.errors(include_url=False):
        field = ".".join(str(p) for p in err["loc"]) or "fields"
        out.append(FieldError(field, _CONSTRAINTS.get(err["type"], err["type"]), err["msg"]))
    return out


class Validator(Protocol[M_co]):
    """Anything that turns raw field data into a validated model or raises ``IdValidationError``."""

    def validate(self, data: Any) -> M_co: ...


class FieldValidator(Generic[M]):
    """Validate field data against a closed pydantic model."""

    def __init__(self, model: type[M]) -> None:
        self.model = model

    def validate(self, data: Mapping[str, Any] | BaseModel) -> M:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as exc:
            raise IdValidationError(field_errors(exc)) from None

    def __repr__(self) -> str:
        return f"FieldValidator({self.model.__name__})"
