# =============================================================================
# app/auth/__init__.py - Authorization Module
# =============================================================================
# Bearer-token authorization in front of the controllers.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"sub": user.sub}
# =============================================================================

from app.auth.dependencies import CurrentUser, get_current_user
from app.auth.middleware import AuthorizationMiddleware, allow_anonymous, require_authorization
from app.auth.models import AuthUser
from app.auth.tokens import authenticate, create_access_token

__all__ = [
    "AuthorizationMiddleware",
    "allow_anonymous",
    "require_authorization",
    "authenticate",
    "create_access_token",
    "get_current_user",
    "CurrentUser",
    "AuthUser",
]
