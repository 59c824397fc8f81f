"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.

Nonce failures share one message on purpose: callers cannot tell an
unknown nonce from an expired or already redeemed one.
"""

from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    ValidationError,
)


class MissingFieldsError(ValidationError):
    """Raised when the verify request lacks address, message or signature."""

    def __init__(self):
        super().__init__(
            "Missing required fields: address, message, signature",
            code="MISSING_FIELDS",
        )


class MalformedMessageError(ValidationError):
    """Raised when a Sign-In-With-Ethereum message cannot be parsed."""

    def __init__(self, reason: str = "Invalid message format - nonce not found"):
        super().__init__(reason, code="MALFORMED_MESSAGE")


class InvalidAddressError(ValidationError):
    """Raised when the claimed address is not a 0x-prefixed 20-byte hex string."""

    def __init__(self):
        super().__init__("Invalid address", code="INVALID_ADDRESS")


class UnsupportedChainError(ValidationError):
    """Raised when the signed message names a chain we have no verifier for."""

    def __init__(self, chain_id: int):
        super().__init__(
            f"Unsupported chain: {chain_id}",
            code="UNSUPPORTED_CHAIN",
            details={"chain_id": chain_id},
        )


class InvalidNonceError(AuthenticationError):
    """Raised when a nonce is unknown, expired or already redeemed."""

    def __init__(self):
        super().__init__("Invalid or expired nonce", code="INVALID_NONCE")


class InvalidSignatureError(AuthenticationError):
    """Raised when the message or its signature does not check out."""

    def __init__(self):
        super().__init__("Invalid signature", code="INVALID_SIGNATURE")


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a bearer token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no bearer token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class NonceStoreError(ExternalServiceError):
    """Raised when the nonce table cannot be written or read."""

    def __init__(self, message: str = "Failed to issue nonce"):
        super().__init__(message, service="supabase", code="NONCE_STORE_ERROR")


class SignatureServiceError(ExternalServiceError):
    """Raised when the chain RPC used for signature checks is unreachable."""

    def __init__(self, chain_id: int, original_error: Optional[str] = None):
        super().__init__(
            "Signature verification service unavailable",
            service="rpc",
            code="SIGNATURE_SERVICE_ERROR",
            details={"chain_id": chain_id, "original_error": original_error},
        )


class IdentityProvisioningError(ExternalServiceError):
    """Raised when the auth provider fails to look up, create or sign in a user."""

    def __init__(self, message: str, original_error: Optional[str] = None):
        super().__init__(
            message,
            service="supabase-auth",
            code="IDENTITY_PROVISIONING_FAILED",
            details={"original_error": original_error} if original_error else {},
        )
