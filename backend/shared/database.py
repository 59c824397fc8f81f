"""
Database client factory for Supabase.

Provides service-role clients (for backend operations bypassing RLS, such as
the nonce table and user provisioning), user-authenticated clients (for
operations respecting RLS), and fresh anonymous clients for password sign-in.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for backend operations that are not owned by a signed-in user:
    issuing and redeeming auth nonces, and provisioning users during sign-in.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_supabase_anon_client() -> Client:
    """
    Get a fresh Supabase client with the anon key.

    A new client is returned on every call because signing in mutates the
    client's auth state.
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def get_supabase_user_client(access_token: str) -> Client:
    """
    Get Supabase client authenticated as a specific user.

    Use this for operations that should respect Row Level Security (RLS),
    i.e. every read and write against vaults, payments and profiles.

    Args:
        access_token: JWT access token from Supabase Auth

    Returns:
        Supabase client whose PostgREST requests carry the user's token
    """
    client = get_supabase_anon_client()
    client.postgrest.auth(access_token)
    return client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
