"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="Synthetic SIWE email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="User role")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)

    @property
    def ethereum_address(self) -> Optional[str]:
        return self.user_metadata.get("ethereum_address")


class SiweMessage(BaseModel):
    """A parsed EIP-4361 Sign-In-With-Ethereum message."""

    scheme: Optional[str] = None
    domain: str
    address: str
    statement: Optional[str] = None
    uri: Optional[str] = None
    version: str = "1"
    chain_id: int
    nonce: str
    issued_at: datetime
    expiration_time: Optional[datetime] = None
    not_before: Optional[datetime] = None
    request_id: Optional[str] = None
    resources: list[str] = Field(default_factory=list)


class NonceResponse(BaseModel):
    """Response from the nonce issuance endpoint."""

    nonce: str = Field(..., description="Single-use nonce to embed in the SIWE message")


class VerifyRequest(BaseModel):
    """
    Signed sign-in request.

    Fields are optional so a missing field is reported with the
    handshake's own 400 message instead of a schema error.
    """

    address: Optional[str] = Field(None, description="Address claiming the signature")
    message: Optional[str] = Field(None, description="SIWE message that was signed")
    signature: Optional[str] = Field(None, description="Hex signature over the message")


class SessionTokens(BaseModel):
    """Session minted for the signed-in user."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
    user_id: str


class VerifyResponse(BaseModel):
    """Successful verification result."""

    ok: bool = True
    address: str
    session: SessionTokens


class AuthErrorResponse(BaseModel):
    """Failure body of the handshake endpoints."""

    error: str
