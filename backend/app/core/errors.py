"""Domain error taxonomy.

Services raise these; the exception handlers registered in ``app.main``
turn them into the ``{"success": false, "error": ...}`` envelope with the
matching HTTP status code.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to a client-visible status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(AppError):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(AppError):
    """Authenticated, but role or restaurant scope does not allow the action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have access to this resource"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    """The write collides with existing state (e.g. a table already booked)."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InvalidTransitionError(AppError):
    """Illegal status change, such as leaving a terminal reservation state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid status transition"


class InternalError(AppError):
    """Unexpected or database failure. The message is never sent to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
