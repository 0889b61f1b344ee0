"""
Application error taxonomy.

Every error the services raise derives from ``AppError`` and carries the
HTTP status it maps to.  ``api.middleware`` renders them as
``{"error": message, "details": ...}``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that are reported to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return error_body(self.message, self.details)


# ═══════════════════════════════════════════════════════════════════════════════
# Generic categories
# ═══════════════════════════════════════════════════════════════════════════════


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(AppError):
    """Resource already exists.  Reported as 400 to keep the client contract."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not authenticated"


class NotFoundError(AppError):
    """Resource absent, or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DependencyError(AppError):
    """The store, the mail transport or the AI endpoint failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Upstream dependency failed"


# ═══════════════════════════════════════════════════════════════════════════════
# Authentication
# ═══════════════════════════════════════════════════════════════════════════════


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid token"


class ExpiredTokenError(AuthenticationError):
    default_message = "Token expired"


class InvalidCredentialsError(AuthenticationError):
    default_message = "Invalid email or password"


# ═══════════════════════════════════════════════════════════════════════════════
# Account flows
# ═══════════════════════════════════════════════════════════════════════════════


class DuplicateEmailError(ConflictError):
    default_message = "User with this email already exists"


class UnknownEmailError(ValidationError):
    default_message = "User with this email does not exist"


class InvalidVerificationTokenError(ValidationError):
    default_message = "Invalid or expired verification token"


class InvalidOrExpiredTokenError(ValidationError):
    default_message = "Invalid or expired reset token"


class EmailDeliveryError(DependencyError):
    default_message = "Failed to send email"


def error_body(message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    """Build the ``{"error": ..., "details"?: ...}`` response body."""
    body: Dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return body
