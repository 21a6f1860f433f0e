"""
Global pytest fixtures for the harvester test suite.

Provides:
- Test environment settings
- Scan session, reporter and emitter fixtures
- Fake provider helpers live in tests/utils.py
"""
import os
import pytest
import structlog

# Set test environment BEFORE any harvester imports read settings
os.environ["TESTING"] = "true"
os.environ["ENVIRONMENT"] = "development"
os.environ.pop("GCP_PROJECT_ID", None)
os.environ.pop("GCP_SERVICE_ACCOUNT_JSON", None)

from harvester.modules.discovery.adapters.emitters import InMemoryEmitter  # noqa: E402
from harvester.schemas.inventory import DiscoverySession  # noqa: E402
from harvester.shared.core.config import get_settings  # noqa: E402
from harvester.shared.core.error_reporting import ErrorReporter  # noqa: E402

PROJECT_ID = "test-project-123"


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def project_id() -> str:
    return PROJECT_ID


@pytest.fixture
def session() -> DiscoverySession:
    return DiscoverySession(id="session-1", source_version="test")


@pytest.fixture
def reporter() -> ErrorReporter:
    return ErrorReporter()


@pytest.fixture
def emitter() -> InMemoryEmitter:
    return InMemoryEmitter()


