"""
Base repository classes for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase access and providing shared utilities for data operations.
"""

from typing import Any, TypeVar, Generic

from postgrest.exceptions import APIError
from supabase import Client

from .scope import OwnerScope


T = TypeVar("T")

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: Exception) -> bool:
    """Return True when a PostgREST error wraps a unique constraint violation."""
    return isinstance(error, APIError) and str(getattr(error, "code", "")) == UNIQUE_VIOLATION


class BaseRepository(Generic[T]):
    """
    Base class for repositories that run with the service-role client.

    Only tables that are not owned by a signed-in user belong here
    (auth nonces, identity provisioning). Owned data goes through
    ScopedRepository instead.
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db


class ScopedRepository(Generic[T]):
    """
    Base class for repositories over owner-protected tables.

    Subclasses receive an OwnerScope rather than a client, so every query
    they build is already filtered to the caller's rows.

    Example:
        class VaultRepository(ScopedRepository[Vault]):
            def get_by_id(self, vault_id: str) -> Optional[Vault]:
                result = self._scope.select("vaults").eq("id", vault_id).execute()
                if not result.data:
                    return None
                return self._map_to_vault(result.data[0])
    """

    def __init__(self, scope: OwnerScope) -> None:
        self._scope = scope

    @property
    def owner_id(self) -> str:
        return self._scope.user_id

    @staticmethod
    def _rows(result: Any) -> list[dict[str, Any]]:
        return list(getattr(result, "data", None) or [])
