"""
Vault repository for database access.

Every query goes through the caller's OwnerScope, so rows owned by other
users are never read and never written.
"""

from typing import Any, Optional

from shared.config import BASE_MAINNET_CHAIN_ID
from shared.repository import ScopedRepository
from .models import DEFAULT_EMOJI, Vault


class VaultRepository(ScopedRepository[Vault]):
    """
    Repository for the ``vaults`` table.

    Writes that match no owned row return None / False rather than raising;
    the service decides what that means.
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_vaults(self) -> list[Vault]:
        """All owned vaults, newest first."""
        result = self._scope.select("vaults").order("created_at", desc=True).execute()
        return [self._map_to_vault(row) for row in self._rows(result)]

    def get_by_id(self, vault_id: str) -> Optional[Vault]:
        result = self._scope.select("vaults").eq("id", vault_id).execute()
        rows = self._rows(result)
        return self._map_to_vault(rows[0]) if rows else None

    def get_by_handle(self, handle: str) -> Optional[Vault]:
        """Look up by handle; handles are stored lowercase."""
        result = self._scope.select("vaults").eq("handle", handle.strip().lower()).execute()
        rows = self._rows(result)
        return self._map_to_vault(rows[0]) if rows else None

    def handles_like(self, base: str) -> dict[str, str]:
        """Map of handle -> vault id for owned handles starting with base."""
        result = self._scope.select("vaults", "id, handle").ilike("handle", f"{base}%").execute()
        return {str(row["handle"]).lower(): str(row["id"]) for row in self._rows(result)}

    def count(self) -> int:
        result = self._scope.select("vaults", "id", count="exact").execute()
        if getattr(result, "count", None) is not None:
            return int(result.count)
        return len(self._rows(result))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, data: dict[str, Any]) -> Vault:
        """Insert a vault for the caller. Raises postgrest APIError on conflicts."""
        result = self._scope.insert("vaults", data).execute()
        return self._map_to_vault(self._rows(result)[0])

    def update(self, vault_id: str, data: dict[str, Any]) -> Optional[Vault]:
        """Update an owned vault; None when no owned row matched."""
        result = self._scope.update("vaults", data).eq("id", vault_id).execute()
        rows = self._rows(result)
        return self._map_to_vault(rows[0]) if rows else None

    def delete(self, vault_id: str) -> bool:
        """Delete an owned vault (payments cascade); False when nothing matched."""
        result = self._scope.delete("vaults").eq("id", vault_id).execute()
        return len(self._rows(result)) > 0

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    def _map_to_vault(self, data: dict[str, Any]) -> Vault:
        """Map database row to Vault model."""
        return Vault(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            name=data["name"],
            handle=data["handle"],
            emoji=data.get("emoji") or DEFAULT_EMOJI,
            chain_id=data.get("chain_id") or BASE_MAINNET_CHAIN_ID,
            description=data.get("description"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
