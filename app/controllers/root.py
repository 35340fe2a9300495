# =============================================================================
# app/controllers/root.py - Root Endpoint
# =============================================================================

from fastapi import APIRouter, Request

from app.auth import CurrentUser
from app.dependencies import SettingsDep

router = APIRouter()


@router.get("/")
async def root(request: Request, settings: SettingsDep, user: CurrentUser):
    """
    Root endpoint - returns API info.

    The docs link is only present when the docs are being served.
    """
    return {
        "name": request.app.title,
        "version": request.app.version,
        "environment": settings.ENVIRONMENT,
        "docs": request.app.docs_url,
        "health": "/api/v1/health",
    }
