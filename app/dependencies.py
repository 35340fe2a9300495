# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings, get_settings


def get_app_settings(request: Request) -> Settings:
    """
    Get the settings the running app was built with.

    Falls back to the global settings for apps that did not record any.
    """
    return getattr(request.app.state, "settings", None) or get_settings()


# Type alias for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
