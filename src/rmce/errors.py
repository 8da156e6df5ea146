"""
Error taxonomy for the RMCE API.

Services raise these; the global error handler renders them as JSON with the
matching HTTP status. Routers never translate them.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class InvalidTokenError(AuthenticationError):
    """Token signature, structure or claims are invalid."""

    def __init__(self, message: str = "Invalid authentication token") -> None:
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Token is past its expiry."""

    def __init__(self, message: str = "Authentication token has expired") -> None:
        super().__init__(message, code="TOKEN_EXPIRED")


class InvalidCredentialsError(AuthenticationError):
    """Email/password pair did not match."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message, code="INVALID_CREDENTIALS")


class ForbiddenError(AppError):
    """Valid identity without ownership of the resource."""

    status_code = 403

    def __init__(self, message: str = "You do not own this resource") -> None:
        super().__init__(message, code="FORBIDDEN")


class NotFoundError(AppError):
    """Resource id does not resolve, or a state-gated transition matched no row."""

    status_code = 404

    def __init__(self, resource: str, resource_id: int | None = None, message: str | None = None) -> None:
        details: dict[str, Any] = {"resource": resource}
        if resource_id is not None:
            details["id"] = resource_id
        super().__init__(message or f"{resource} not found", code="NOT_FOUND", details=details)


class ConflictError(AppError):
    """Uniqueness violation."""

    status_code = 409

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFLICT")


class PayloadValidationError(AppError):
    """Request payload is well-formed JSON but semantically invalid."""

    status_code = 422

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InternalError(AppError):
    """Store or signing failure."""

    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, code="INTERNAL_ERROR")


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration detected at startup."""
