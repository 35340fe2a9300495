# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the service.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Two families live here:
# - Request errors (rendered as JSON by the handlers below)
# - Host startup errors (caught in app.main.main and turned into exit code 1)
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """
    Base exception for the service.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SERVICE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authorization Exceptions
# =============================================================================

class UnauthorizedError(ServiceException):
    """Raised when a request to a protected endpoint has no valid bearer token."""

    def __init__(self, reason: str):
        super().__init__(
            message=reason,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Send 'Authorization: Bearer <token>' with a valid, unexpired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


# =============================================================================
# Host Startup Exceptions
# =============================================================================

class HostStartupError(ServiceException):
    """Raised when the web host cannot start serving."""

    def __init__(self, message: str, code: str = "HOST_STARTUP_FAILED", **kwargs: Any):
        super().__init__(message=message, code=code, **kwargs)


class InvalidListenUrlError(HostStartupError):
    """Raised when a listen URL cannot be parsed into an endpoint."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            message=f"Invalid listen URL {url!r}: {reason}",
            code="INVALID_LISTEN_URL",
            suggestion="Use the form http://HOST:PORT, where HOST may be '+' or '*' for all interfaces",
            details={"url": url},
        )


class ListenerBindError(HostStartupError):
    """Raised when a listening socket cannot be bound (e.g. port already in use)."""

    def __init__(self, url: str, error: str):
        super().__init__(
            message=f"Failed to bind to address {url}: {error}",
            code="LISTENER_BIND_FAILED",
            suggestion="Stop the process already using this port, or free the address",
            details={"url": url, "error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Convert ServiceException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
