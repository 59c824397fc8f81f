"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, runtime_checkable

from .models import NonceResponse, VerifyRequest, VerifyResponse


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the Sign-In-With-Ethereum handshake.

    A client fetches a nonce, embeds it in a SIWE message, signs the message
    with its wallet and posts it back to verify.
    """

    async def issue_nonce(self) -> NonceResponse:
        """
        Issue a single-use nonce.

        Returns:
            NonceResponse with a fresh nonce valid for the configured TTL

        Raises:
            NonceStoreError: If the nonce could not be stored
        """
        ...

    async def verify(self, request: VerifyRequest) -> VerifyResponse:
        """
        Verify a signed SIWE message and open a session.

        The nonce is consumed before the signature is checked, so a failed
        attempt always needs a fresh nonce.

        Args:
            request: Claimed address, SIWE message and signature

        Returns:
            VerifyResponse with the canonical address and session tokens

        Raises:
            ValidationError: Missing fields, malformed message or unsupported chain
            AuthenticationError: Invalid or expired nonce, or bad signature
            ExternalServiceError: Storage, RPC or auth provider failure
        """
        ...
