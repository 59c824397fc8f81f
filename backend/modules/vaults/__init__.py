"""
Vaults module.

Vaults are named budget categories owned by one user. Each has a URL-safe
handle that is unique among its owner's vaults.

Public API:
- IVaultService: Interface for vault operations
- Vault, CreateVaultRequest, UpdateVaultRequest: Models
- generate_handle: Name to handle normalization
"""

from .interfaces import IVaultService
from .models import Vault, CreateVaultRequest, UpdateVaultRequest, VaultListResponse
from .handles import generate_handle, HANDLE_MAX_LENGTH
from .exceptions import VaultNotFoundError, HandleConflictError

__all__ = [
    "IVaultService",
    "Vault",
    "CreateVaultRequest",
    "UpdateVaultRequest",
    "VaultListResponse",
    "generate_handle",
    "HANDLE_MAX_LENGTH",
    "VaultNotFoundError",
    "HandleConflictError",
]
