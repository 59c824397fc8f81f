"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


# 0x-prefixed, 40 hex characters (same check as the database constraints)
ETH_ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
TX_HASH_PATTERN = r"^0x[a-fA-F0-9]{64}$"

_ETH_ADDRESS_RE = re.compile(ETH_ADDRESS_PATTERN)


def is_eth_address(value: Optional[str]) -> bool:
    """Return True when value looks like an Ethereum address."""
    return bool(value) and _ETH_ADDRESS_RE.match(value) is not None


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Populated from the Supabase JWT minted by the SIWE handshake and made
    available to route handlers via dependency injection. The raw access
    token is kept so repositories can open an RLS-scoped client.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    address: Optional[str] = Field(None, description="Ethereum address the user signed in with")
    access_token: str = Field(default="", repr=False, description="Bearer token for RLS-scoped access")
    last_sign_in: Optional[datetime] = Field(None, description="Token issue time")
    role: str = Field(default="user", description="User role")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }
