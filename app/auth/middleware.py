# =============================================================================
# app/auth/middleware.py - Authorization Middleware
# =============================================================================
# Sits in front of the controller dispatcher and authenticates the request:
#
# - A valid bearer token puts the principal on request.state.user.
# - A missing or bad token leaves request.state.user unset and records the
#   reason on request.state.auth_error.
#
# The middleware never rejects on its own: unknown paths and API docs must
# still reach the dispatcher (404 / docs). Rejection happens in
# require_authorization, which the app runs for every controller endpoint
# that is not decorated with @allow_anonymous.
# =============================================================================

import logging
from typing import Callable, Optional, TypeVar

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.auth.tokens import authenticate
from app.config import Settings
from app.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

ANONYMOUS_ATTR = "__allow_anonymous__"

F = TypeVar("F", bound=Callable)


def allow_anonymous(endpoint: F) -> F:
    """
    Mark a controller endpoint as reachable without a token.

    Apply it below the route decorator:

        @router.get("/health")
        @allow_anonymous
        async def health_check(): ...
    """
    setattr(endpoint, ANONYMOUS_ATTR, True)
    return endpoint


def is_anonymous(endpoint: Optional[Callable]) -> bool:
    return bool(getattr(endpoint, ANONYMOUS_ATTR, False))


def matched_endpoint(request: Request) -> Optional[Callable]:
    """The endpoint function the router dispatched this request to."""
    endpoint = request.scope.get("endpoint")
    if endpoint is None:
        endpoint = getattr(request.scope.get("route"), "endpoint", None)
    return endpoint


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """Authenticate bearer tokens ahead of dispatch."""

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.user = None
        request.state.auth_error = None

        try:
            request.state.user = authenticate(request.headers.get("Authorization"), self.settings)
        except UnauthorizedError as exc:
            request.state.auth_error = exc.message
        else:
            logger.debug(f"Authenticated {request.state.user.sub} for {request.method} {request.url.path}")

        return await call_next(request)


async def require_authorization(request: Request) -> None:
    """
    App-wide dependency: reject unauthenticated calls to protected endpoints.

    Raises:
        UnauthorizedError: 401 unless the endpoint is @allow_anonymous or the
            middleware authenticated the request
    """
    endpoint = matched_endpoint(request)
    if is_anonymous(endpoint):
        return

    if getattr(request.state, "user", None) is None:
        reason = getattr(request.state, "auth_error", None) or "Not authenticated"
        logger.warning(f"Rejected {request.method} {request.url.path}: {reason}")
        raise UnauthorizedError(reason)
