"""
Global pytest configuration for test database toggling.

Usage:
- Default: reuse test DB across runs for speed.
- Override quickly via CLI:
    pytest --db-mode=recreate   # drop and re-create test DB
    pytest --db-mode=flush      # keep schema, flush data at session start
    pytest --db-mode=reuse      # reuse existing test DB (default)
- Or via env var (takes effect if CLI option omitted):
    PYTEST_DB_MODE=recreate pytest

Modes:
- reuse:     pytest-django --reuse-db (fastest, no deletion)
- recreate:  force re-create test DB (--create-db, disable reuse)
- flush:     reuse schema but flush all data once at session start
"""

import os
import secrets

import pytest
from django.core.management import call_command


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--db-mode",
        action="store",
        default=os.getenv("PYTEST_DB_MODE", "reuse"),
        choices=["reuse", "recreate", "flush"],
        help=(
            "Test DB mode: 'reuse' (default), 'recreate' (drop & re-create), or "
            "'flush' (keep schema, clear data at session start)."
        ),
    )


def pytest_configure(config: pytest.Config) -> None:
    mode = config.getoption("--db-mode")

    # Normalize pytest-django options based on requested mode
    if mode == "recreate":
        config.option.reuse_db = False
        config.option.create_db = True
    elif mode == "reuse":
        config.option.reuse_db = True
        config.option.create_db = False
    elif mode == "flush":
        # Reuse schema for speed; data cleared by fixture below
        config.option.reuse_db = True
        config.option.create_db = False


@pytest.fixture(scope="session", autouse=True)
def _maybe_flush_db(request: pytest.FixtureRequest, django_db_blocker) -> None:  # type: ignore[no-redef]
    """Flush DB once at session start if --db-mode=flush."""
    mode = request.config.getoption("--db-mode")
    if mode != "flush":
        return

    with django_db_blocker.unblock():
        call_command("flush", verbosity=0, interactive=False)


@pytest.fixture
def bridge_api_key(settings):
    """
    Turn on API key checking for the duration of a test.

    Returns the configured key so tests can present it.
    """
    key = secrets.token_urlsafe(16)
    settings.BRIDGE_API_KEY = key
    return key


@pytest.fixture
def api_client(request):
    """
    Fixture that provides a DRF APIClient.

    Tests marked with @pytest.mark.api_key get a client that presents the
    configured key as a Bearer token; the ``bridge_api_key`` fixture is
    requested automatically for them.
    """
    from rest_framework.test import APIClient

    client = APIClient()

    marker_names = {marker.name for marker in request.node.iter_markers()}
    if "api_key" in marker_names:
        key = request.getfixturevalue("bridge_api_key")
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {key}")

    return client


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Auto-categorize tests as unit or integration based on patterns.

    Note: Tests can override these auto-markers by explicitly using decorators:
    @pytest.mark.integration, @pytest.mark.unit, @pytest.mark.slow
    """
    for item in items:
        marker_names = {marker.name for marker in item.iter_markers()}

        # Real-time tests wait on delivery threads
        if "slow" not in marker_names:
            if "realtime" in item.nodeid.lower():
                item.add_marker(pytest.mark.slow)

        has_test_type = "integration" in marker_names or "unit" in marker_names
        if not has_test_type:
            # Integration test patterns:
            # - API view tests (test request/response cycle)
            # - Tests with "API" in class name
            # - Tests in api/ directories
            is_integration = "test_api" in item.nodeid or "/api/" in item.nodeid or "API" in str(item.cls)

            if is_integration:
                item.add_marker(pytest.mark.integration)
            else:
                item.add_marker(pytest.mark.unit)
