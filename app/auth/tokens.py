# =============================================================================
# app/auth/tokens.py - Bearer Token Issue / Verify
# =============================================================================
# HMAC-signed JWTs via python-jose. The service only verifies tokens; issuing
# is provided for operators (scripts/issue_token.py) and tests.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from app.auth.models import AuthUser, TokenPayload
from app.config import Settings
from app.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def create_access_token(
    subject: str,
    settings: Settings,
    email: Optional[str] = None,
    roles: Iterable[str] = (),
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed bearer token.

    Args:
        subject: Principal id, stored in the 'sub' claim
        settings: Provides SECRET_KEY, JWT_ALGORITHM and JWT_AUDIENCE
        email: Optional 'email' claim
        roles: Optional 'roles' claim
        expires_delta: Lifetime (default ACCESS_TOKEN_EXPIRE_MINUTES);
            a negative delta yields an already-expired token

    Returns:
        The encoded JWT string
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": subject,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + expires_delta,
    }
    if email:
        claims["email"] = email
    roles = list(roles)
    if roles:
        claims["roles"] = roles

    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    Raises:
        UnauthorizedError: header missing or not a Bearer credential
    """
    if not authorization:
        raise UnauthorizedError("Not authenticated: missing Authorization header")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        raise UnauthorizedError("Not authenticated: expected a Bearer token")
    return token


def verify_access_token(token: str, settings: Settings) -> AuthUser:
    """
    Verify signature, expiry and audience, and return the principal.

    Raises:
        UnauthorizedError: token invalid, expired or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError as e:
        raise UnauthorizedError(f"Invalid token: {e}")

    try:
        claims = TokenPayload(**payload)
    except ValidationError as e:
        logger.debug(f"Token claims rejected: {e}")
        raise UnauthorizedError("Invalid token: missing or malformed claims")

    return AuthUser(sub=claims.sub, email=claims.email, roles=tuple(claims.roles))


def authenticate(authorization: Optional[str], settings: Settings) -> AuthUser:
    """Header value in, principal out. Raises UnauthorizedError."""
    return verify_access_token(extract_bearer_token(authorization), settings)
