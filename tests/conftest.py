"""
Pytest configuration and fixtures for Monitoring Lab API tests.
"""

import os
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

# Set up test environment variables before importing anything else
os.environ.setdefault("APP_NAME", "Monitoring Lab API Test")
os.environ.setdefault("APP_VERSION", "1.0.0")
os.environ.setdefault("SERVICE_NAME", "monitoring-lab-api")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_monitoring_lab.db")
os.environ.setdefault("TELEMETRY_BACKEND", "log")
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "true")

from monitoring_api.core.database import DatabaseManager  # noqa: E402
from monitoring_api.core.settings import ApiSettings, get_settings  # noqa: E402
from monitoring_api.events.base import EventSink  # noqa: E402
from monitoring_api.events.schemas import ExceptionReport, TelemetryEvent  # noqa: E402
from monitoring_api.main import create_app  # noqa: E402
from monitoring_api.services.cache import InMemoryCache  # noqa: E402


class RecordingEventSink(EventSink):
    """Event sink that keeps everything it receives."""

    def __init__(self) -> None:
        self.events: List[TelemetryEvent] = []
        self.exceptions: List[ExceptionReport] = []
        self.correlation_ids: List[Optional[str]] = []

    async def track_event(
        self, event: TelemetryEvent, correlation_id: Optional[str] = None
    ) -> None:
        self.events.append(event)
        self.correlation_ids.append(correlation_id)

    async def track_exception(
        self, report: ExceptionReport, correlation_id: Optional[str] = None
    ) -> None:
        self.exceptions.append(report)
        self.correlation_ids.append(correlation_id)

    def event_names(self) -> List[str]:
        return [e.name for e in self.events]


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def settings_overrides() -> Dict[str, Any]:
    """Override per test module to change settings."""
    return {}


@pytest.fixture
def test_settings(settings_overrides: Dict[str, Any]) -> ApiSettings:
    return get_settings().model_copy(update=settings_overrides)


@pytest.fixture
async def test_database_manager(tmp_path) -> AsyncGenerator[DatabaseManager, None]:
    """Per-test SQLite database with tables created."""
    manager = DatabaseManager(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
def response_cache() -> InMemoryCache:
    return InMemoryCache(max_size=100, default_ttl=300)


@pytest.fixture
def test_app(test_settings, event_sink, response_cache, test_database_manager):
    return create_app(
        app_settings=test_settings,
        event_sink=event_sink,
        response_cache=response_cache,
        database_manager=test_database_manager,
    )


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app without a network."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    await test_app.state.telemetry_dispatcher.drain()


@pytest.fixture
def dispatcher(test_app):
    return test_app.state.telemetry_dispatcher
