"""
Vaults module interface.

The API layer and other modules depend on IVaultService, not on the
Supabase-backed implementation.
"""

from typing import Protocol, runtime_checkable

from .models import CreateVaultRequest, UpdateVaultRequest, Vault, VaultListResponse


@runtime_checkable
class IVaultService(Protocol):
    """
    Interface for vault operations.

    Implementations are bound to one caller; every method only sees that
    caller's vaults.
    """

    async def create_vault(self, request: CreateVaultRequest) -> Vault:
        """
        Create a vault.

        The handle is derived from the name (or the explicit handle) and
        suffixed with -2, -3, ... until it is unique among the caller's vaults.

        Raises:
            HandleConflictError: If no free handle was found within the retry budget
        """
        ...

    async def list_vaults(self) -> VaultListResponse:
        """List the caller's vaults, newest first."""
        ...

    async def get_vault(self, vault_id: str) -> Vault:
        """
        Get a vault by id.

        Raises:
            VaultNotFoundError: If missing or not owned
        """
        ...

    async def get_vault_by_handle(self, handle: str) -> Vault:
        """Get a vault by handle (case-insensitive)."""
        ...

    async def update_vault(self, vault_id: str, request: UpdateVaultRequest) -> Vault:
        """Update name, handle, emoji or description."""
        ...

    async def delete_vault(self, vault_id: str) -> None:
        """Delete a vault and, through the foreign key, its payments."""
        ...
