"""
Profile repository for database access.
"""

from typing import Any, Optional

from shared.repository import ScopedRepository
from .models import UserProfile


class ProfileRepository(ScopedRepository[UserProfile]):
    """
    Repository for the caller's ``user_profiles`` row.

    Rows are inserted by the ``handle_new_user`` trigger, never here.
    """

    def get(self) -> Optional[UserProfile]:
        result = self._scope.select("user_profiles").execute()
        rows = self._rows(result)
        return self._map_to_profile(rows[0]) if rows else None

    def update(self, data: dict[str, Any]) -> Optional[UserProfile]:
        """Update the caller's profile; None when the row does not exist."""
        rows = self._rows(self._scope.update("user_profiles", data).execute())
        return self._map_to_profile(rows[0]) if rows else None

    def count_vaults(self) -> int:
        result = self._scope.select("vaults", "id", count="exact").execute()
        if getattr(result, "count", None) is not None:
            return int(result.count)
        return len(self._rows(result))

    def _map_to_profile(self, data: dict[str, Any]) -> UserProfile:
        """Map database row to UserProfile model."""
        return UserProfile(
            user_id=str(data["user_id"]),
            address=data["address"],
            sub_account_address=data.get("sub_account_address"),
            sub_account_factory=data.get("sub_account_factory"),
            sub_account_factory_data=data.get("sub_account_factory_data"),
            onboarding_complete=bool(data.get("onboarding_complete")),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
