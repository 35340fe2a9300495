# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Gives controllers the principal the AuthorizationMiddleware already verified.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"sub": user.sub}
# =============================================================================

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.models import AuthUser
from app.exceptions import UnauthorizedError

# Verification happens in the middleware; this only documents the bearer
# scheme in the OpenAPI schema (the "Authorize" button in Swagger UI).
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Return the authenticated principal for this request.

    Raises:
        UnauthorizedError: 401 if the middleware did not authenticate the
            request (e.g. the endpoint is @allow_anonymous)
    """
    user = getattr(request.state, "user", None)
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return user


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
