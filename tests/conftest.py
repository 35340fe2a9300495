# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Provides apps/clients per runtime mode and a token factory
# =============================================================================

import os
import socket

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789")
os.environ.setdefault("DEBUG", "false")
os.environ.pop("ASPNETCORE_ENVIRONMENT", None)

import pytest
from fastapi.testclient import TestClient

from app.auth import create_access_token
from app.config import Settings
from app.main import create_app


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def dev_settings():
    """Settings for development mode (docs enabled)."""
    return Settings(ENVIRONMENT="development")


@pytest.fixture
def prod_settings():
    """Settings for production mode (docs disabled)."""
    return Settings(ENVIRONMENT="production")


@pytest.fixture
def dev_client(dev_settings):
    """Test client for a development-mode app."""
    with TestClient(create_app(dev_settings)) as client:
        yield client


@pytest.fixture
def prod_client(prod_settings):
    """Test client for a production-mode app."""
    with TestClient(create_app(prod_settings)) as client:
        yield client


@pytest.fixture
def make_token(dev_settings):
    """Factory for bearer tokens signed with the test settings."""
    def _make(subject="user-123", settings=None, **kwargs):
        return create_access_token(subject, settings or dev_settings, **kwargs)
    return _make


@pytest.fixture
def auth_headers(make_token):
    """Authorization header with a valid token."""
    return {"Authorization": f"Bearer {make_token(email='user@example.com', roles=['reader'])}"}


@pytest.fixture
def busy_port():
    """A localhost port held by a listening socket for the duration of the test."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()


@pytest.fixture
def free_port():
    """A localhost port that was free a moment ago."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
