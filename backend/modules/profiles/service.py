"""
Profiles service implementation.
"""

import logging
from datetime import datetime, timezone

from .exceptions import ProfileNotFoundError
from .interfaces import IProfileService
from .models import OnboardingStatus, SetSubAccountRequest, UserProfile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService(IProfileService):
    """Profile operations for one caller."""

    def __init__(self, repository: ProfileRepository):
        self._repo = repository

    async def get_profile(self) -> UserProfile:
        profile = self._repo.get()
        if profile is None:
            raise ProfileNotFoundError(self._repo.owner_id)
        return profile

    async def set_sub_account(self, request: SetSubAccountRequest) -> UserProfile:
        profile = self._repo.update(
            {
                "sub_account_address": request.address,
                "sub_account_factory": request.factory,
                "sub_account_factory_data": request.factory_data,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        if profile is None:
            raise ProfileNotFoundError(self._repo.owner_id)
        logger.info(f"Stored sub account {request.address} for user {self._repo.owner_id}")
        return profile

    async def get_onboarding_status(self) -> OnboardingStatus:
        """
        Onboarding is needed until it is completed; a missing profile
        counts as not onboarded.
        """
        profile = self._repo.get()
        return OnboardingStatus(
            needs_onboarding=True if profile is None else not profile.onboarding_complete,
            vault_count=self._repo.count_vaults(),
            has_sub_account=bool(profile and profile.sub_account_address),
        )

    async def complete_onboarding(self) -> UserProfile:
        profile = self._repo.update(
            {
                "onboarding_complete": True,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        if profile is None:
            raise ProfileNotFoundError(self._repo.owner_id)
        return profile
