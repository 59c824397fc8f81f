"""
Wallet identity provisioning.

Maps an Ethereum address to a Supabase Auth user. Each address gets a
synthetic email and a password derived with HMAC-SHA256 from a server-side
secret, so the credential never leaves the backend and is reproducible on
every sign-in.
"""

import hashlib
import hmac
import logging
from typing import Callable, Optional

from postgrest.exceptions import APIError
from supabase import AuthError, Client

from shared.database import get_supabase_anon_client
from shared.repository import BaseRepository

from .exceptions import IdentityProvisioningError
from .models import SessionTokens

logger = logging.getLogger(__name__)


def canonical_address(address: str) -> str:
    """Lowercase form used for lookups, emails and credentials."""
    return address.strip().lower()


def synthetic_email(address: str, domain: str) -> str:
    return f"{canonical_address(address)}@{domain}"


def derive_password(secret: str, address: str) -> str:
    """HMAC-SHA256 of the canonical address, keyed with the server secret."""
    if not secret:
        raise IdentityProvisioningError("Sign-in is not configured")
    return hmac.new(
        secret.encode("utf-8"),
        canonical_address(address).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


class IdentityRepository(BaseRepository[SessionTokens]):
    """
    Resolves wallet addresses to auth users and opens sessions.

    Runs with the service-role client for lookups and user creation. Sign-in
    uses a fresh anon client per call because it mutates client auth state.
    """

    def __init__(
        self,
        db: Client,
        password_secret: str,
        email_domain: str,
        sign_in_client_factory: Callable[[], Client] = get_supabase_anon_client,
    ) -> None:
        super().__init__(db)
        self._password_secret = password_secret
        self._email_domain = email_domain
        self._sign_in_client_factory = sign_in_client_factory

    def resolve_session(self, address: str) -> SessionTokens:
        """
        Find or create the user for an address and sign them in.

        Raises:
            IdentityProvisioningError: If the provider fails at any step.
        """
        address = canonical_address(address)
        email = synthetic_email(address, self._email_domain)
        password = derive_password(self._password_secret, address)

        user_id = self.find_user_id(address)
        if user_id is None:
            try:
                user_id = self.create_user(address, email, password)
            except IdentityProvisioningError:
                # A concurrent sign-in may have created the user first
                user_id = self.find_user_id(address)
                if user_id is None:
                    raise
                logger.info(f"User for {address} was created concurrently")

        return self.sign_in(email, password)

    # -------------------------------------------------------------------------
    # Provider calls
    # -------------------------------------------------------------------------

    def find_user_id(self, address: str) -> Optional[str]:
        """Look up the user id bound to an address through user_profiles."""
        try:
            result = (
                self._db.table("user_profiles")
                .select("user_id")
                .ilike("address", canonical_address(address))
                .limit(1)
                .execute()
            )
        except APIError as e:
            logger.error(f"Profile lookup failed: {e.message}")
            raise IdentityProvisioningError("Profile lookup failed", e.message)

        if not result.data:
            return None
        return str(result.data[0]["user_id"])

    def create_user(self, address: str, email: str, password: str) -> str:
        """Create a confirmed auth user; the profile row is made by a trigger."""
        try:
            response = self._db.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": {"ethereum_address": canonical_address(address)},
                }
            )
        except AuthError as e:
            logger.warning(f"Failed to create user for {address}: {e.message}")
            raise IdentityProvisioningError("Failed to create user", e.message)

        logger.info(f"Created user {response.user.id} for {address}")
        return str(response.user.id)

    def sign_in(self, email: str, password: str) -> SessionTokens:
        """Password sign-in; returns the session tokens."""
        client = self._sign_in_client_factory()
        try:
            response = client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            logger.error(f"Sign-in failed for {email}: {e.message}")
            raise IdentityProvisioningError("Sign-in failed", e.message)

        session = response.session
        if session is None:
            raise IdentityProvisioningError("Sign-in failed")

        return SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            token_type=session.token_type or "bearer",
            expires_in=session.expires_in,
            expires_at=session.expires_at,
            user_id=str(session.user.id),
        )
