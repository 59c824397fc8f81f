"""
Base exception classes for the SubVault backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class SubVaultError(Exception):
    """
    Base exception for all SubVault errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class NotFoundError(SubVaultError):
    """Resource not found (or not owned by the caller)."""

    pass


class ValidationError(SubVaultError):
    """Input validation failed."""

    pass


class AuthenticationError(SubVaultError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(SubVaultError):
    """Authorization failed (row outside the caller's ownership)."""

    pass


class ConflictError(SubVaultError):
    """A uniqueness constraint could not be satisfied."""

    pass


class ExternalServiceError(SubVaultError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
