"""
Vaults module exceptions.
"""

from shared.exceptions import ConflictError, NotFoundError


class VaultNotFoundError(NotFoundError):
    """Raised when a vault does not exist or is not owned by the caller."""

    def __init__(self, vault_id: str):
        super().__init__(
            f"Vault not found: {vault_id}",
            code="VAULT_NOT_FOUND",
            details={"vault_id": vault_id},
        )


class HandleConflictError(ConflictError):
    """Raised when no free handle was found within the retry budget."""

    def __init__(self, handle: str, attempts: int):
        super().__init__(
            f"Could not find a free handle for '{handle}'",
            code="HANDLE_CONFLICT",
            details={"handle": handle, "attempts": attempts},
        )
