from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from timesheet_tracker.container import build_container
from timesheet_tracker.main import create_app
from timesheet_tracker.persistence.memory_backend import InMemoryBackend


@pytest.fixture
def fixed_now():
    return datetime(2026, 2, 2, 9, 0, 0, tzinfo=ZoneInfo("America/Toronto"))


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def container(backend):
    c = build_container(backend=backend, start_workers=False)
    yield c
    c.shutdown()


@pytest.fixture
def app(backend):
    app = create_app(settings_module="config.testing", backend=backend, start_workers=False)
    yield app
    app.extensions["timesheet"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()
