"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The auth service is a process-wide singleton. Vault, payment, profile and
summary services are built per request around the caller's OwnerScope, so
they can only ever see that caller's rows.
"""

from typing import TYPE_CHECKING

from fastapi import Depends

from shared.database import get_supabase_user_client
from shared.models import AuthenticatedUser
from shared.scope import OwnerScope

from .middleware.auth import get_current_user

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.payments.interfaces import IPaymentService
    from modules.profiles.interfaces import IProfileService
    from modules.summaries.interfaces import ISummaryService
    from modules.vaults.interfaces import IVaultService


class ServiceContainer:
    """
    Container for process-wide service instances.

    Services are created lazily on first access and cached.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService()
        return self._auth_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_owner_scope(user: AuthenticatedUser = Depends(get_current_user)) -> OwnerScope:
    """FastAPI dependency for the caller's owner scope (RLS-scoped client)."""
    return OwnerScope(get_supabase_user_client(user.access_token), user.id)


def get_vault_service(scope: OwnerScope = Depends(get_owner_scope)) -> "IVaultService":
    """FastAPI dependency for the caller's vault service."""
    from modules.vaults.repository import VaultRepository
    from modules.vaults.service import VaultService
    return VaultService(VaultRepository(scope))


def get_payment_service(scope: OwnerScope = Depends(get_owner_scope)) -> "IPaymentService":
    """FastAPI dependency for the caller's payment service."""
    from modules.payments.repository import PaymentRepository
    from modules.payments.service import PaymentService
    return PaymentService(PaymentRepository(scope))


def get_profile_service(scope: OwnerScope = Depends(get_owner_scope)) -> "IProfileService":
    """FastAPI dependency for the caller's profile service."""
    from modules.profiles.repository import ProfileRepository
    from modules.profiles.service import ProfileService
    return ProfileService(ProfileRepository(scope))


def get_summary_service(scope: OwnerScope = Depends(get_owner_scope)) -> "ISummaryService":
    """FastAPI dependency for the caller's summary service."""
    from modules.summaries.repository import SummaryRepository
    from modules.summaries.service import SummaryService
    return SummaryService(SummaryRepository(scope))
