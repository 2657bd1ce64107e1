"""Error taxonomy shared by the room lifecycle and token issuance services.

Every failure a service can report is a ``RoomServiceError`` subclass carrying an
``ErrorKind``, so callers branch on ``error.kind`` (or the class) instead of
matching message text. ``message`` is always safe to show to clients.
"""
from __future__ import annotations

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    ROOM_UNAVAILABLE = "room_unavailable"
    REPOSITORY = "repository"
    SIGNING = "signing"
    INVALID_TOKEN = "invalid_token"


class RoomServiceError(Exception):
    """Base class for failures surfaced by the core services."""

    kind: ErrorKind
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RoomServiceError):
    """Client input failed schema, range, or format checks."""

    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class NotFoundError(RoomServiceError):
    """The referenced room does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Room not found"


class RoomUnavailableError(RoomServiceError):
    """The room is missing or closed; the two cases are reported identically."""

    kind = ErrorKind.ROOM_UNAVAILABLE
    default_message = "Room not available"


class RepositoryError(RoomServiceError):
    """The backing store failed for a reason unrelated to the input."""

    kind = ErrorKind.REPOSITORY
    default_message = "Room storage is temporarily unavailable"


class SigningError(RoomServiceError):
    """Credential minting failed because signing is misconfigured."""

    kind = ErrorKind.SIGNING
    default_message = "Unable to issue access token"


class InvalidTokenError(RoomServiceError):
    """A presented token failed signature or expiry checks."""

    kind = ErrorKind.INVALID_TOKEN
    default_message = "Token is invalid"

    def __init__(self, message: str | None = None, *, expired: bool = False) -> None:
        super().__init__(message or ("Token has expired" if expired else None))
        self.expired = expired
