"""
Pytest configuration and fixtures

Every test gets a fresh in-memory store and a clock pinned to a fixed
Wednesday morning, so nothing depends on the real date.
"""
import pytest
from fastapi.testclient import TestClient

from fittrack.config import Settings, get_settings
from fittrack.core.service import ProgressService
from fittrack.core.session import FixedClock, StaticSessionProvider
from fittrack.core.storage import InMemoryRecordStore
from fittrack.main import app

from factories import NOW, USER_ID


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def store():
    """Fresh in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def service(store, clock, settings):
    """Progress service signed in as the default test user."""
    return ProgressService(store, StaticSessionProvider(USER_ID), clock, settings)


@pytest.fixture
def client(store, clock, settings):
    """
    TestClient wired to the test store and clock.

    The store and clock are swapped on app.state and restored afterwards.
    """
    previous = (app.state.store, app.state.clock)
    app.state.store = store
    app.state.clock = clock
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        app.state.store, app.state.clock = previous


@pytest.fixture
def auth_headers():
    return {"X-User-Id": USER_ID}
