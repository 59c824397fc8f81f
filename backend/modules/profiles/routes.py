"""
Profile API endpoints.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_profile_service

from .interfaces import IProfileService
from .models import OnboardingStatus, SetSubAccountRequest, UserProfile

router = APIRouter()


@router.get("", response_model=UserProfile)
async def get_profile(service: IProfileService = Depends(get_profile_service)) -> UserProfile:
    """Get the current user's profile."""
    return await service.get_profile()


@router.patch("/sub-account", response_model=UserProfile)
async def set_sub_account(
    request: SetSubAccountRequest,
    service: IProfileService = Depends(get_profile_service),
) -> UserProfile:
    """
    Store the Sub Account the wallet created for this app.
    """
    return await service.set_sub_account(request)


@router.get("/onboarding", response_model=OnboardingStatus)
async def get_onboarding_status(
    service: IProfileService = Depends(get_profile_service),
) -> OnboardingStatus:
    return await service.get_onboarding_status()


@router.post("/onboarding/complete", response_model=UserProfile)
async def complete_onboarding(
    service: IProfileService = Depends(get_profile_service),
) -> UserProfile:
    return await service.complete_onboarding()
