"""
Shared infrastructure for SubVault backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- scope: Owner-scoped query capability
- repository: Base repository classes

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import (
    get_supabase_client,
    get_supabase_anon_client,
    get_supabase_user_client,
    reset_client_cache,
)
from .exceptions import (
    SubVaultError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
)
from .models import AuthenticatedUser
from .scope import OwnerScope

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_anon_client",
    "get_supabase_user_client",
    "reset_client_cache",
    "SubVaultError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "ExternalServiceError",
    "AuthenticatedUser",
    "OwnerScope",
]
