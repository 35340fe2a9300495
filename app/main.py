# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# Bootstraps the DockerAPITest service:
#   1. API docs (Swagger UI, ReDoc, OpenAPI schema) in development only
#   2. Authorization middleware ahead of dispatch
#   3. Controllers
#   4. Listen on all interfaces, port 8080
#
# Usage:
#   python -m app [--environment development] [--log-level debug]
#   dockerapitest                      # console script, same thing
#   uvicorn app.asgi:app               # app only; uvicorn picks the port
# =============================================================================

import argparse
import logging
import sys
from typing import Optional, Sequence

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from pydantic_settings import SettingsError

from app.auth import AuthorizationMiddleware, require_authorization
from app.config import Settings, get_settings
from app.controllers import map_controllers
from app.exceptions import (
    ServiceException,
    service_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.host import WebHost

APP_TITLE = "DockerAPITest"
APP_VERSION = "1.0.0"

# All network interfaces, port 8080
LISTEN_URL = "http://+:8080"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings, force: bool = False) -> None:
    """Configure root logging (main() forces it so CLI overrides apply)."""
    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
        force=force,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings (default: the cached global settings)

    Returns:
        FastAPI: app with docs (development only), authorization and controllers
    """
    settings = settings or get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=APP_TITLE,
        description="Containerised sample Web API. Endpoints require a bearer token "
                    "unless marked otherwise.",
        version=APP_VERSION,
        # Every controller endpoint, including ones mapped later
        dependencies=[Depends(require_authorization)],
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        openapi_tags=[
            {
                "name": "Auth",
                "description": "Verify bearer tokens",
            },
            {
                "name": "Health",
                "description": "API health and liveness checks",
            },
        ],
    )
    app.state.settings = settings

    # =========================================================================
    # Middleware
    # =========================================================================

    app.add_middleware(AuthorizationMiddleware, settings=settings)

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # =========================================================================
    # Controllers
    # =========================================================================

    map_controllers(app)

    logger.debug(f"Built {APP_TITLE} app (environment={settings.ENVIRONMENT}, docs={docs_enabled})")
    return app


# =============================================================================
# Command Line
# =============================================================================

def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse process arguments.

    Unrecognised arguments are ignored so launchers can pass extra flags.
    """
    parser = argparse.ArgumentParser(prog="dockerapitest", description=f"Run the {APP_TITLE} service")
    parser.add_argument(
        "--environment",
        help="Runtime mode (docs are served only in development); overrides ENVIRONMENT",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (debug, info, warning, error, critical); overrides LOG_LEVEL",
    )
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        logger.debug(f"Ignoring arguments: {unknown}")
    return args


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from the environment, with command-line overrides applied."""
    overrides = {}
    if args.environment:
        overrides["ENVIRONMENT"] = args.environment
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level
    return Settings(**overrides) if overrides else get_settings()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Start the service and block until it is stopped.

    Returns:
        0 after a clean shutdown, 1 if the host could not start
    """
    args = parse_args(argv)

    try:
        settings = load_settings(args)
    except (ValidationError, SettingsError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(settings, force=True)
    logger.info(f"Starting {APP_TITLE} in {settings.ENVIRONMENT} mode")

    try:
        host = WebHost(create_app(settings), settings)
        host.urls.clear()
        host.urls.append(LISTEN_URL)
        host.run()
    except ServiceException as e:
        logger.error(f"Host terminated unexpectedly: {e.message}")
        return 1
    except Exception as e:
        logger.exception(f"Host terminated unexpectedly: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
