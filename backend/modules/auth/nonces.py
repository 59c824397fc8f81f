"""
Authentication nonce store.

Nonces live in the shared ``auth_nonces`` table so every API instance sees
the same set. Redemption is a single DELETE filtered on the nonce and its
expiry; exactly one returned row means this caller won the nonce.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.repository import BaseRepository, is_unique_violation

from .exceptions import NonceStoreError

logger = logging.getLogger(__name__)

NONCE_TABLE = "auth_nonces"
NONCE_BYTES = 16  # 128 bits of entropy
MAX_ISSUE_ATTEMPTS = 3


def generate_nonce() -> str:
    """Return a fresh hex nonce."""
    return secrets.token_hex(NONCE_BYTES)


class NonceRepository(BaseRepository[str]):
    """Issues, redeems and garbage-collects auth nonces."""

    def __init__(self, db: Client, ttl_seconds: int = 300) -> None:
        super().__init__(db)
        self._ttl = timedelta(seconds=ttl_seconds)

    def issue(self, now: Optional[datetime] = None) -> str:
        """
        Create and persist a nonce.

        A primary-key collision is retried with a fresh value; any other
        storage failure, or running out of attempts, raises NonceStoreError.
        """
        now = now or datetime.now(timezone.utc)
        row = {
            "created_at": now.isoformat(),
            "expires_at": (now + self._ttl).isoformat(),
        }

        for attempt in range(1, MAX_ISSUE_ATTEMPTS + 1):
            nonce = generate_nonce()
            try:
                self._db.table(NONCE_TABLE).insert({"nonce": nonce, **row}).execute()
                return nonce
            except APIError as e:
                if is_unique_violation(e):
                    logger.warning(f"Nonce collision on attempt {attempt}, regenerating")
                    continue
                logger.error(f"Failed to store nonce: {e.message}")
                raise NonceStoreError()

        raise NonceStoreError("Failed to issue a unique nonce")

    def redeem(self, nonce: str, now: Optional[datetime] = None) -> bool:
        """
        Consume a nonce.

        Returns True only when this call deleted exactly one unexpired row.
        An unknown, expired or already consumed nonce returns False.
        """
        now = now or datetime.now(timezone.utc)
        try:
            result = (
                self._db.table(NONCE_TABLE)
                .delete()
                .eq("nonce", nonce)
                .gt("expires_at", now.isoformat())
                .execute()
            )
        except APIError as e:
            logger.error(f"Failed to redeem nonce: {e.message}")
            raise NonceStoreError("Failed to redeem nonce")
        return len(result.data or []) == 1

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete expired nonces and return how many were removed."""
        now = now or datetime.now(timezone.utc)
        result = (
            self._db.table(NONCE_TABLE)
            .delete()
            .lt("expires_at", now.isoformat())
            .execute()
        )
        return len(result.data or [])
