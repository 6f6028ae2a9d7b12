"""
Global pytest fixtures for the TinyURL Platform test suite.

Responsibilities:
    - Provide a controllable clock so expiry can be tested at exact instants
    - Provide isolated in-memory Storage and RedirectMetrics fixtures
    - Provide a ShorteningEngine wired to those fixtures
    - Provide a fresh FastAPI TestClient via the app factory for integration tests

Why an app factory?
    Using `create_app()` ensures each test gets fresh in-memory state,
    eliminating cross-test flakiness.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from tinyurl_platform.analytics.analytics import RedirectMetrics
from tinyurl_platform.config import ShortenerConfig
from tinyurl_platform.manager.shortening_engine import ShorteningEngine
from tinyurl_platform.storage.storage import Storage

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def metrics() -> RedirectMetrics:
    return RedirectMetrics()


@pytest.fixture
def config() -> ShortenerConfig:
    return ShortenerConfig(base_url="http://localhost:8080", default_expiry_days=30, code_length=6, max_retries=5)


@pytest.fixture
def engine(storage, metrics, config, clock) -> ShorteningEngine:
    """Provide a ShorteningEngine wired to the storage, metrics and clock fixtures."""
    return ShorteningEngine(storage=storage, config=config, metrics=metrics, clock=clock)


@pytest.fixture
def client(storage, metrics, config) -> TestClient:
    """
    Provide a fresh TestClient with a new app instance.

    Rate limiting is disabled here; tests that exercise it build their own app.
    """
    app = create_app(storage=storage, metrics=metrics, config=config, rate_limit_per_minute=0)
    return TestClient(app)
