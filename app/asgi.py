# =============================================================================
# app/asgi.py - Module-level App for ASGI Servers
# =============================================================================
# Usage:
#   uvicorn app.asgi:app --host 0.0.0.0 --port 8080
#
# Settings are loaded on import; `python -m app` goes through app.main.main()
# instead, which reports configuration errors and exits with status 1.
# =============================================================================

from app.config import get_settings
from app.main import configure_logging, create_app

configure_logging(get_settings())
app = create_app()
