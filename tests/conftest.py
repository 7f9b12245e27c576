"""Pytest configuration and shared fixtures for the migration resolver tests."""
import sys
import logging
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from datamigrate.config.settings import MigrationSettings
from datamigrate.migrations.registry import MigrationRegistry
from datamigrate.migrations.runner import MigrationRunner


# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)


def identity(data: Dict[str, Any]) -> Dict[str, Any]:
    return data


def set_field(key: str, value: Any) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """Build a transformation that sets ``key`` on a copy of the data."""
    def transform(data: Dict[str, Any]) -> Dict[str, Any]:
        migrated = data.copy()
        migrated[key] = value
        return migrated
    return transform


@pytest.fixture(name="set_field")
def set_field_fixture():
    """Provide the ``set_field`` transformation factory."""
    return set_field


@pytest.fixture
def settings():
    """Default settings."""
    return MigrationSettings()


@pytest.fixture
def registry(settings):
    """Empty registry using the shortest-path strategy."""
    return MigrationRegistry(settings)


@pytest.fixture
def greedy_registry():
    """Empty registry using the first-match strategy."""
    return MigrationRegistry(MigrationSettings(path_strategy="greedy"))


@pytest.fixture
def linear_registry(registry):
    """Registry with 1.0.0 -> 1.1.0 -> 1.2.0 -> 2.0.0."""
    registry.register_migration("1.0.0", "1.1.0", set_field("monitoring", True), "Add monitoring flag")
    registry.register_migration("1.1.0", "1.2.0", set_field("encryption", False), "Add encryption flag")
    registry.register_migration("1.2.0", "2.0.0", set_field("layout", "v2"), "Switch to v2 layout")
    return registry


@pytest.fixture
def runner(linear_registry):
    return MigrationRunner(linear_registry)


@pytest.fixture
def env_file(tmp_path):
    """Write a .env file and return its path."""
    def write(content: str) -> Path:
        path = tmp_path / ".env"
        path.write_text(content, encoding="utf-8")
        return path
    return write


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep DATAMIGRATE_* variables from the outer environment out of the tests."""
    import os
    for key in list(os.environ):
        if key.startswith("DATAMIGRATE_"):
            monkeypatch.delenv(key, raising=False)
