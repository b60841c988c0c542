"""Error taxonomy for the authentication flow.

Every error carries the HTTP status it maps to and a public message that is
safe to return to clients. Internal details (hashes, codes, driver errors)
never go into ``message``.
"""
from __future__ import annotations

from fastapi import status


class AppError(Exception):
    """Base class for errors that are reported to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed request shape."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class NotFoundError(AppError):
    """Something the request refers to does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class UnknownEmailError(NotFoundError):
    """No parent is registered under the email."""

    message = "Email address not found"


class ChallengeNotFoundError(NotFoundError):
    """No outstanding challenge: never issued, already used or replaced."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Verification code not found"


class ChallengeExpiredError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Verification code expired"


class CodeMismatchError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Incorrect verification code"


class RateLimitedError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Too many verification attempts. Please try again later."


class AuthError(AppError):
    """Session token problems on protected operations."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid token"


class MissingTokenError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Missing token"


class InvalidTokenError(AuthError):
    pass


class TransientStoreError(AppError):
    """The backing store could not be reached. Callers may retry the request."""


__all__ = [
    "AppError",
    "AuthError",
    "ChallengeExpiredError",
    "ChallengeNotFoundError",
    "CodeMismatchError",
    "InvalidTokenError",
    "MissingTokenError",
    "NotFoundError",
    "RateLimitedError",
    "TransientStoreError",
    "UnknownEmailError",
    "ValidationError",
]
