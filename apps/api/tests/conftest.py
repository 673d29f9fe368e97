"""Pytest configuration for the API tests."""

from typing import Any

import docker
import pytest
from docker.errors import DockerException

pytest_plugins = [
    "pytest_databases.docker.postgres",
]


# ==============================================================================
# PYTEST CONFIGURATION
# ==============================================================================


def pytest_configure(config: Any) -> None:
    """Register custom markers for test organization."""
    config.addinivalue_line("markers", "integration: Tests that need a PostgreSQL container")
    # Domain markers
    config.addinivalue_line("markers", "domain_courts: Tests for courts domain")
    config.addinivalue_line("markers", "domain_suggestions: Tests for edit and new-court suggestions domain")
    config.addinivalue_line("markers", "domain_moderation: Tests for moderation domain")
    config.addinivalue_line("markers", "domain_bans: Tests for bans domain")
    config.addinivalue_line("markers", "domain_reviews: Tests for reviews domain")
    config.addinivalue_line("markers", "domain_photos: Tests for photos domain")
    config.addinivalue_line("markers", "domain_auth: Tests for auth domain")


def _docker_available() -> bool:
    try:
        client = docker.from_env()
        client.ping()
    except DockerException:
        return False
    client.close()
    return True


def pytest_collection_modifyitems(config: Any, items: list[pytest.Item]) -> None:
    """Skip integration tests when no docker daemon is reachable."""
    integration = [item for item in items if item.get_closest_marker("integration")]
    if not integration or _docker_available():
        return
    skip = pytest.mark.skip(reason="docker is not available for the PostgreSQL container")
    for item in integration:
        item.add_marker(skip)
