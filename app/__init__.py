# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the DockerAPITest web service:
# - main.py: Bootstrap (app factory, command line, listen URL)
# - asgi.py: Module-level app for `uvicorn app.asgi:app`
# - host.py: Listen URLs and the uvicorn serve loop
# - config.py: Environment variable loading and settings
# - exceptions.py: Error types and JSON exception handlers
# - auth/: Bearer-token authorization middleware and dependencies
# - controllers/: Endpoint routers mapped by the dispatcher
# =============================================================================
