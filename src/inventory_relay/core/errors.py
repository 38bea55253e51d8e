"""Service error taxonomy.

Every error raised by the service layer derives from :class:`ServiceError`
and carries the HTTP status it maps to. The request boundary turns them into
``{"error": message}`` responses.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthorizationError(ServiceError):
    """Missing or invalid ownership signature."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid ownership signature"


class AttestationError(AuthorizationError):
    """Device attestation was rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid app attestation"


class NotFoundError(ServiceError):
    """Unknown share code or backup key."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ServiceError):
    """The code or key is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class ExpiredError(ServiceError):
    """An expiring share is past its expiry but not yet evicted."""

    status_code = status.HTTP_410_GONE
    default_message = "Share has expired"


class RateLimitError(ServiceError):
    """The caller exhausted its request window."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded"

    def __init__(self, reset_at: datetime, message: str | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class InternalError(ServiceError):
    """Unexpected failure that must not leak details to the client."""
