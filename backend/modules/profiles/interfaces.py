"""
Profiles module interface.
"""

from typing import Protocol, runtime_checkable

from .models import OnboardingStatus, SetSubAccountRequest, UserProfile


@runtime_checkable
class IProfileService(Protocol):
    """Interface for the caller's profile."""

    async def get_profile(self) -> UserProfile:
        """
        Get the caller's profile.

        Raises:
            ProfileNotFoundError: If the profile row does not exist
        """
        ...

    async def set_sub_account(self, request: SetSubAccountRequest) -> UserProfile:
        """Store the Sub Account created by the wallet."""
        ...

    async def get_onboarding_status(self) -> OnboardingStatus:
        """Whether onboarding is needed, plus the caller's vault count."""
        ...

    async def complete_onboarding(self) -> UserProfile:
        """Mark onboarding as done."""
        ...
