"""
Authentication module.

Handles the Sign-In-With-Ethereum handshake: nonce issuance and redemption,
SIWE message parsing, signature verification and session creation.

Public API:
- IAuthService: Interface for the handshake
- SiweMessage, VerifyRequest, VerifyResponse, SessionTokens: Models
- Auth exceptions: InvalidNonceError, InvalidSignatureError, etc.
"""

from .interfaces import IAuthService
from .models import (
    JWTPayload,
    NonceResponse,
    SessionTokens,
    SiweMessage,
    VerifyRequest,
    VerifyResponse,
)
from .exceptions import (
    MissingFieldsError,
    MalformedMessageError,
    InvalidAddressError,
    UnsupportedChainError,
    InvalidNonceError,
    InvalidSignatureError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    NonceStoreError,
    SignatureServiceError,
    IdentityProvisioningError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "JWTPayload",
    "NonceResponse",
    "SessionTokens",
    "SiweMessage",
    "VerifyRequest",
    "VerifyResponse",
    # Exceptions
    "MissingFieldsError",
    "MalformedMessageError",
    "InvalidAddressError",
    "UnsupportedChainError",
    "InvalidNonceError",
    "InvalidSignatureError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "NonceStoreError",
    "SignatureServiceError",
    "IdentityProvisioningError",
]
