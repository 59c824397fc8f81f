"""
JWT Authentication middleware.

Validates the Supabase JWTs minted by the SIWE handshake and extracts the
caller's identity.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from datetime import datetime, timezone

from modules.auth.exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from modules.auth.models import JWTPayload
from shared.config import get_settings
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> JWTPayload:
    """
    Decode and validate a Supabase JWT token.

    Args:
        token: The JWT token string

    Returns:
        JWTPayload with decoded claims

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()

    if not settings.supabase_jwt_secret:
        raise InvalidTokenError("Server authentication not configured")

    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
        return JWTPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except (JWTError, ValueError):
        raise InvalidTokenError()


def get_user_from_payload(payload: JWTPayload, token: str) -> AuthenticatedUser:
    """
    Convert JWT payload to AuthenticatedUser model.

    The token is kept on the user so data access can run as that user.
    """
    return AuthenticatedUser(
        id=payload.sub,
        address=payload.ethereum_address,
        access_token=token,
        last_sign_in=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
        role=payload.role if payload.role != "authenticated" else "user",
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a signed-in wallet.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None:
        raise MissingTokenError()

    payload = decode_token(credentials.credentials)
    return get_user_from_payload(payload, credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Use this for endpoints that work with or without authentication.
    """
    if credentials is None:
        return None

    try:
        payload = decode_token(credentials.credentials)
        return get_user_from_payload(payload, credentials.credentials)
    except AuthenticationError:
        return None


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
OptionalAuth = Depends(get_optional_user)
