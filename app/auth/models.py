# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the authenticated principal.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated principal extracted from a bearer token.

    This is the minimal identity available from the token itself.
    """
    model_config = ConfigDict(frozen=True)  # Make immutable

    sub: str
    email: Optional[str] = None
    roles: tuple[str, ...] = ()


class TokenPayload(BaseModel):
    """
    Decoded bearer token payload.

    Standard JWT claims plus the optional email/roles claims.
    """
    sub: str  # Subject (principal id)
    aud: str  # Audience (must equal settings.JWT_AUDIENCE)
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    email: Optional[str] = None
    roles: list[str] = []


class VerifyResponse(BaseModel):
    """Response of GET /api/v1/auth/verify."""
    valid: bool
    sub: str
    email: Optional[str] = None
    roles: list[str] = []
