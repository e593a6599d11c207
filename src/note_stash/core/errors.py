"""Domain error taxonomy and its wire representation.

Every error the service raises on purpose derives from :class:`NoteStashError`
and knows its HTTP status and error label. The API layer renders them as
``{timestamp, status, error, message}`` bodies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from fastapi import status

from note_stash.db.time import utcnow


class NoteStashError(Exception):
    """Base class for errors that map onto a stable HTTP response."""

    status_code: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: ClassVar[str] = "Internal Server Error"
    default_message: ClassVar[str] = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self, timestamp: datetime | None = None) -> dict[str, Any]:
        """Return the structured error body for this exception."""
        return error_body(self.status_code, self.error, self.message, timestamp)


class ValidationFailed(NoteStashError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"
    default_message = "Invalid request"


class AlreadyExists(NoteStashError):
    """A registration collided with an existing handle or address."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"User '{value}' already exists.")


class InvalidCredentials(NoteStashError):
    """Login failed. The message never says which half was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    default_message = "Invalid username or password"

    def __init__(self) -> None:
        super().__init__(self.default_message)


class TokenExpired(NoteStashError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"
    default_message = "Refresh token has been expired!"


class Unauthenticated(NoteStashError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    default_message = "Could not validate credentials"


class NotFound(NoteStashError):
    """Missing resource, or one owned by somebody else."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"
    default_message = "Resource not found"


class Expired(NoteStashError):
    """The resource exists but its visibility window has passed."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"

    def __init__(self, note_id: int) -> None:
        self.note_id = note_id
        super().__init__(f"Note '{note_id}' has already expired.")


class RateLimited(NoteStashError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "Too Many Requests"
    default_message = "Too many requests, please try again later."


class DependencyFailure(NoteStashError):
    """An external store could not be reached or rejected the operation."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"
    default_message = "A backing service is unavailable."


class TokenError(Exception):
    """Base class for token decoding failures."""


class MalformedToken(TokenError):
    """The token structure or its required claims could not be parsed."""


class InvalidSignature(TokenError):
    """The token parsed but its signature did not verify."""


def error_body(
    status_code: int,
    error: str,
    message: str,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    """Build the structured error body shared by every error response."""
    return {
        "timestamp": (timestamp or utcnow()).isoformat(),
        "status": status_code,
        "error": error,
        "message": message,
    }
