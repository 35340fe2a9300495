# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the DockerAPITest service:
# - test_config.py: Settings loading and runtime mode
# - test_exceptions.py: Error types and their JSON shape
# - test_host.py: Listen URL parsing, socket binding, serve loop
# - test_bootstrap.py: API docs per runtime mode, dispatch
# - test_authorization.py: Authorization middleware and controllers
# - test_main.py: Command line and process exit codes
#
# Run tests with: pytest
# =============================================================================
