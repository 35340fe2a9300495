# =============================================================================
# app/controllers/ - Controller Registry
# =============================================================================
# Each controller is a FastAPI router. CONTROLLERS lists them with their URL
# prefix; map_controllers() mounts them on the app (the request dispatcher).
#
# - root.py: Service info
# - health.py: Health check endpoints (anonymous)
# - auth.py: Token verification endpoint
#
# Endpoints require a bearer token unless decorated with @allow_anonymous.
# =============================================================================

import logging
from dataclasses import dataclass, field

from fastapi import APIRouter, FastAPI

from . import auth, health, root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Controller:
    """A router plus where it is mounted."""
    router: APIRouter
    prefix: str = ""
    tags: list[str] = field(default_factory=list)


CONTROLLERS: list[Controller] = [
    Controller(root.router, tags=["Root"]),
    Controller(health.router, prefix="/api/v1", tags=["Health"]),
    Controller(auth.router, prefix="/api/v1/auth", tags=["Auth"]),
]


def map_controllers(app: FastAPI, controllers: list[Controller] | None = None) -> None:
    """Mount every registered controller on the app."""
    for controller in CONTROLLERS if controllers is None else controllers:
        app.include_router(controller.router, prefix=controller.prefix, tags=controller.tags)
        logger.debug(f"Mapped {', '.join(controller.tags) or 'controller'} at '{controller.prefix or '/'}'")


__all__ = ["Controller", "CONTROLLERS", "map_controllers"]
