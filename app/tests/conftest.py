import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `core.config`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest

from infrastructure.configuration import Settings
from infrastructure.configuration.features import (
    FanoutFeatureSettings,
    InboxFeatureSettings,
)
from infrastructure.configuration.infrastructure import IdempotencySettings
from infrastructure.configuration.integrations import ExpoSettings
from infrastructure.events import clear_handlers
from infrastructure.persistence import MemoryDocumentStore


@pytest.fixture
def settings_factory():
    """Factory for Settings with per-section overrides.

    Example:
        settings = settings_factory(fanout={"INBOX_WRITE_ENABLED": False})
    """

    def _factory(**sections) -> Settings:
        overrides = {}
        for name, section_class in (
            ("fanout", FanoutFeatureSettings),
            ("inbox", InboxFeatureSettings),
            ("idempotency", IdempotencySettings),
            ("expo", ExpoSettings),
        ):
            values = {"IDEMPOTENCY_BACKEND": "memory"} if name == "idempotency" else {}
            values.update(sections.get(name, {}))
            overrides[name] = section_class(**values)
        return Settings(**overrides)

    return _factory


@pytest.fixture
def test_settings(settings_factory):
    """Settings with the in-memory idempotency backend."""
    return settings_factory()


@pytest.fixture
def memory_store():
    """Empty in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture(autouse=True)
def reset_event_handlers():
    """Keep the global event handler registry isolated between tests."""
    clear_handlers()
    yield
    clear_handlers()
