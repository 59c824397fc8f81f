"""
Vaults module data models.

A vault is a named budget category that groups payments.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from shared.config import BASE_MAINNET_CHAIN_ID

DEFAULT_EMOJI = "💼"

ChainId = Literal[8453, 84532]


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class Vault(BaseModel):
    """A vault as stored."""

    id: str
    user_id: str
    name: str
    handle: str
    emoji: str = DEFAULT_EMOJI
    chain_id: int = BASE_MAINNET_CHAIN_ID
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateVaultRequest(BaseModel):
    """Request to create a vault."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    handle: Optional[str] = Field(
        None,
        max_length=100,
        description="Explicit handle; normalized the same way as a name",
    )
    emoji: str = Field(default=DEFAULT_EMOJI, max_length=16)
    chain_id: ChainId = Field(default=BASE_MAINNET_CHAIN_ID)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _strip_required(v)


class UpdateVaultRequest(BaseModel):
    """
    Partial vault update.

    Changing the name regenerates the handle unless a handle is given.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    handle: Optional[str] = Field(None, max_length=100)
    emoji: Optional[str] = Field(None, max_length=16)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _strip_required(v)


class VaultListResponse(BaseModel):
    """All of the caller's vaults, newest first."""

    vaults: list[Vault]
    total: int
