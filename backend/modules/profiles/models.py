"""
Profiles module data models.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from shared.models import ETH_ADDRESS_PATTERN


class UserProfile(BaseModel):
    """
    Profile row created by the database when the auth user is created.

    Holds the wallet address the user signed in with and the Sub Account
    the wallet created for this app.
    """

    user_id: str
    address: str
    sub_account_address: Optional[str] = None
    sub_account_factory: Optional[str] = None
    sub_account_factory_data: Optional[str] = None
    onboarding_complete: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SetSubAccountRequest(BaseModel):
    """Sub Account reported by the wallet after it was created."""

    address: str = Field(..., pattern=ETH_ADDRESS_PATTERN)
    factory: Optional[str] = Field(None, pattern=ETH_ADDRESS_PATTERN)
    factory_data: Optional[str] = Field(None, pattern=r"^0x[a-fA-F0-9]*$")


class OnboardingStatus(BaseModel):
    """Whether the onboarding flow should be shown."""

    needs_onboarding: bool
    vault_count: int
    has_sub_account: bool
