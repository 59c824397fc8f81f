"""
Profiles module.

The caller's profile: signed-in address, Sub Account and onboarding flag.
"""

from .interfaces import IProfileService
from .models import UserProfile, SetSubAccountRequest, OnboardingStatus
from .exceptions import ProfileNotFoundError

__all__ = [
    "IProfileService",
    "UserProfile",
    "SetSubAccountRequest",
    "OnboardingStatus",
    "ProfileNotFoundError",
]
