# =============================================================================
# app/controllers/auth.py - Authentication Endpoints
# =============================================================================
# Tokens are issued out of band (scripts/issue_token.py); this controller
# lets a client check the one it holds.
# =============================================================================

from fastapi import APIRouter

from app.auth import CurrentUser
from app.auth.models import VerifyResponse

router = APIRouter()


@router.get("/verify", response_model=VerifyResponse)
async def verify_token(user: CurrentUser) -> VerifyResponse:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is missing, invalid or expired
    """
    return VerifyResponse(
        valid=True,
        sub=user.sub,
        email=user.email,
        roles=list(user.roles),
    )
