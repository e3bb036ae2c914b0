"""Error taxonomy shared by every Id format.

Every public failure is an :class:`IdError`. Validation and structural errors
are raised before any HMAC is computed; authentication failures always carry the
same message so callers cannot tell a wrong key from a tampered Id.
"""

from __future__ import annotations

from dataclasses import dataclass

AUTHENTICATION_FAILED = "Invalid ID [mac]"


class IdError(Exception):
    """Base class for all errors raised by :mod:`truestamp_id`."""


class MissingKeyError(IdError):
    """Raised when no key was supplied."""

    def __init__(self, detail: str = "Missing key") -> None:
        super().__init__(detail)


class InvalidKeyLengthError(IdError):
    """Raised when the key has the wrong length for the format."""

    def __init__(self, expected: str, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid key length: expected {expected}, received {actual}")


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single field violation, e.g. ``FieldError("record_version", "maximum", ...)``."""

    field: str
    constraint: str
    message: str

    @property
    def path(self) -> str:
        return f"{self.field}/{self.constraint}"


class IdValidationError(IdError, ValueError):
    """Raised when one or more fields fall outside their declared domain."""

    def __init__(self, errors: list[FieldError] | tuple[FieldError, ...]) -> None:
        self.errors: tuple[FieldError, ...] = tuple(errors)
        details = "; ".join(f"{e.path}: {e.message}" for e in self.errors)
        super().__init__(f"Invalid ID fields [{details}]")

    @property
    def paths(self) -> list[str]:
        return [e.path for e in self.errors]


class StructuralError(IdError, ValueError):
    """Raised when an Id string or payload is malformed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid ID structure: {detail}")


class AuthenticationError(IdError):
    """Raised when the authentication tag does not match."""

    def __init__(self) -> None:
        super().__init__(AUTHENTICATION_FAILED)
