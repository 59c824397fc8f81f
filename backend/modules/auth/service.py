"""
Authentication service implementation.

Runs the Sign-In-With-Ethereum handshake: nonce issuance, single-use
redemption, message and signature checks, and session creation.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from postgrest.exceptions import APIError

from shared.config import Settings, get_settings
from shared.database import get_supabase_client
from shared.models import is_eth_address

from .exceptions import (
    InvalidAddressError,
    InvalidNonceError,
    InvalidSignatureError,
    MissingFieldsError,
    UnsupportedChainError,
)
from .identity import IdentityRepository, canonical_address
from .interfaces import IAuthService
from .models import NonceResponse, SiweMessage, VerifyRequest, VerifyResponse
from .nonces import NonceRepository
from .signatures import SignatureVerifier
from .siwe import check_message_window, parse_siwe_message

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    SIWE handshake backed by Supabase.

    Nonces and user provisioning use the service-role client; signatures are
    checked locally or against the RPC of the chain named in the message.
    """

    def __init__(
        self,
        nonces: Optional[NonceRepository] = None,
        verifier: Optional[SignatureVerifier] = None,
        identity: Optional[IdentityRepository] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        if nonces is None or identity is None:
            db = get_supabase_client()
            nonces = nonces or NonceRepository(db, self._settings.nonce_ttl_seconds)
            identity = identity or IdentityRepository(
                db,
                password_secret=self._settings.password_secret,
                email_domain=self._settings.siwe_email_domain,
            )
        self._nonces = nonces
        self._identity = identity
        self._verifier = verifier or SignatureVerifier(self._settings)

    async def issue_nonce(self) -> NonceResponse:
        """Purge expired nonces, then store and return a fresh one."""
        try:
            purged = self._nonces.purge_expired()
            if purged:
                logger.debug(f"Purged {purged} expired nonces")
        except APIError as e:
            logger.warning(f"Failed to purge expired nonces: {e.message}")

        return NonceResponse(nonce=self._nonces.issue())

    async def verify(self, request: VerifyRequest) -> VerifyResponse:
        """Verify a signed SIWE message and open a session."""
        if not request.address or not request.message or not request.signature:
            raise MissingFieldsError()

        if not is_eth_address(request.address):
            raise InvalidAddressError()

        message = parse_siwe_message(request.message)
        if self._settings.rpc_url_for_chain(message.chain_id) is None:
            raise UnsupportedChainError(message.chain_id)

        if not self._nonces.redeem(message.nonce):
            raise InvalidNonceError()

        address = canonical_address(request.address)
        logger.info(f"Verifying signature for {address} on chain {message.chain_id}")

        if not self._check_message(message, address):
            self._log_rejection(address, message, request.message)
            raise InvalidSignatureError()

        valid = await self._verifier.verify(
            address, request.message, request.signature, message.chain_id
        )
        if not valid:
            self._log_rejection(address, message, request.message)
            raise InvalidSignatureError()

        session = self._identity.resolve_session(address)
        logger.info(f"Signed in {address} as user {session.user_id}")

        return VerifyResponse(address=address, session=session)

    def _check_message(self, message: SiweMessage, address: str) -> bool:
        if canonical_address(message.address) != address:
            return False
        if self._settings.siwe_domain and message.domain != self._settings.siwe_domain:
            return False
        return check_message_window(message, datetime.now(timezone.utc))

    def _log_rejection(self, address: str, message: SiweMessage, text: str) -> None:
        logger.warning(
            f"Signature rejected for {address} on chain {message.chain_id}; "
            f"message: {text!r}"
        )
