"""
Vault API endpoints.

Errors from the service (not found, conflicts) are turned into responses by
the application's exception handlers.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_vault_service

from .interfaces import IVaultService
from .models import CreateVaultRequest, UpdateVaultRequest, Vault, VaultListResponse

router = APIRouter()


@router.post("", response_model=Vault, status_code=201)
async def create_vault(
    request: CreateVaultRequest,
    service: IVaultService = Depends(get_vault_service),
) -> Vault:
    """
    Create a vault.

    The handle comes from the name (or `handle`) and gets a numeric suffix
    when the caller already has a vault with that handle.
    """
    return await service.create_vault(request)


@router.get("", response_model=VaultListResponse)
async def list_vaults(service: IVaultService = Depends(get_vault_service)) -> VaultListResponse:
    """List the current user's vaults, newest first."""
    return await service.list_vaults()


@router.get("/by-handle/{handle}", response_model=Vault)
async def get_vault_by_handle(
    handle: str,
    service: IVaultService = Depends(get_vault_service),
) -> Vault:
    return await service.get_vault_by_handle(handle)


@router.get("/{vault_id}", response_model=Vault)
async def get_vault(
    vault_id: str,
    service: IVaultService = Depends(get_vault_service),
) -> Vault:
    return await service.get_vault(vault_id)


@router.patch("/{vault_id}", response_model=Vault)
async def update_vault(
    vault_id: str,
    request: UpdateVaultRequest,
    service: IVaultService = Depends(get_vault_service),
) -> Vault:
    """
    Update a vault.

    Renaming regenerates the handle unless `handle` is supplied.
    """
    return await service.update_vault(vault_id, request)


@router.delete("/{vault_id}", status_code=204)
async def delete_vault(
    vault_id: str,
    service: IVaultService = Depends(get_vault_service),
) -> None:
    """
    Delete a vault and all of its payments.
    """
    await service.delete_vault(vault_id)
