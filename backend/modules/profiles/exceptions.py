"""
Profiles module exceptions.
"""

from shared.exceptions import NotFoundError


class ProfileNotFoundError(NotFoundError):
    """Raised when the caller has no profile row yet."""

    def __init__(self, user_id: str):
        super().__init__(
            "Profile not found",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )
