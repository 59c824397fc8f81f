"""
Vaults service implementation.

Handles CRUD for the caller's vaults and keeps handles unique per owner.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from postgrest.exceptions import APIError

from shared.config import Settings, get_settings
from shared.repository import is_unique_violation

from .exceptions import HandleConflictError, VaultNotFoundError
from .handles import base_handle, first_free_handle
from .interfaces import IVaultService
from .models import CreateVaultRequest, UpdateVaultRequest, Vault, VaultListResponse
from .repository import VaultRepository

logger = logging.getLogger(__name__)

# Room kept for a "-NNN" suffix when listing taken handles
_SUFFIX_ROOM = 4


class VaultService(IVaultService):
    """
    Vault operations for one caller.

    Built per request around an owner-scoped repository.
    """

    def __init__(self, repository: VaultRepository, settings: Optional[Settings] = None):
        self._repo = repository
        self._settings = settings or get_settings()

    async def create_vault(self, request: CreateVaultRequest) -> Vault:
        """Create a vault with the first free handle for its name."""
        base = base_handle(request.name, request.handle, self._settings.handle_max_length)
        row = {
            "name": request.name,
            "emoji": request.emoji,
            "chain_id": request.chain_id,
            "description": request.description,
        }

        vault = self._write_with_handle(base, lambda handle: self._repo.create({**row, "handle": handle}))
        logger.info(f"Created vault {vault.id} with handle {vault.handle}")
        return vault

    async def list_vaults(self) -> VaultListResponse:
        vaults = self._repo.list_vaults()
        return VaultListResponse(vaults=vaults, total=len(vaults))

    async def get_vault(self, vault_id: str) -> Vault:
        vault = self._repo.get_by_id(vault_id)
        if vault is None:
            raise VaultNotFoundError(vault_id)
        return vault

    async def get_vault_by_handle(self, handle: str) -> Vault:
        vault = self._repo.get_by_handle(handle)
        if vault is None:
            raise VaultNotFoundError(handle)
        return vault

    async def update_vault(self, vault_id: str, request: UpdateVaultRequest) -> Vault:
        """
        Update a vault.

        A new name regenerates the handle unless an explicit handle is given.
        The vault's own current handle never counts as a collision.
        """
        current = await self.get_vault(vault_id)
        changes: dict[str, Any] = {
            field: value
            for field, value in request.model_dump(exclude_unset=True).items()
            if field != "handle" and (value is not None or field == "description")
        }
        changes["updated_at"] = datetime.now(timezone.utc).isoformat()

        if request.handle is not None or request.name is not None:
            base = base_handle(
                request.name or current.name,
                request.handle,
                self._settings.handle_max_length,
            )

            def write(handle: str) -> Optional[Vault]:
                return self._repo.update(vault_id, {**changes, "handle": handle})

            vault = self._write_with_handle(base, write, exclude_id=vault_id)
        else:
            vault = self._repo.update(vault_id, changes)

        if vault is None:
            raise VaultNotFoundError(vault_id)
        return vault

    async def delete_vault(self, vault_id: str) -> None:
        """Delete a vault; its payments go with it."""
        if not self._repo.delete(vault_id):
            raise VaultNotFoundError(vault_id)
        logger.info(f"Deleted vault {vault_id}")

    # -------------------------------------------------------------------------
    # Handle assignment
    # -------------------------------------------------------------------------

    def _write_with_handle(
        self,
        base: str,
        write: Callable[[str], Optional[Vault]],
        exclude_id: Optional[str] = None,
    ) -> Optional[Vault]:
        """
        Run write() with the first free handle for base.

        A unique violation means a concurrent writer took the candidate; the
        candidate is skipped and the next suffix tried, up to
        handle_max_attempts times.
        """
        max_length = self._settings.handle_max_length
        attempts = self._settings.handle_max_attempts
        prefix = base[: max(1, max_length - _SUFFIX_ROOM)]
        rejected: set[str] = set()

        for attempt in range(1, attempts + 1):
            taken = {
                handle
                for handle, vault_id in self._repo.handles_like(prefix).items()
                if vault_id != exclude_id
            }
            candidate = first_free_handle(base, taken | rejected, max_length)
            try:
                return write(candidate)
            except APIError as e:
                if not is_unique_violation(e):
                    raise
                logger.info(f"Handle {candidate} taken concurrently (attempt {attempt})")
                rejected.add(candidate)

        raise HandleConflictError(base, attempts)
