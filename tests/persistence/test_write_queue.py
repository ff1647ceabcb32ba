from __future__ import annotations

import pytest

from timesheet_tracker.core.enums import SyncStatus, WriteKind
from timesheet_tracker.core.exceptions import PersistenceError
from timesheet_tracker.persistence.memory_backend import InMemoryBackend
from timesheet_tracker.persistence.write_queue import WriteQueue, backoff_delay


class FlakyBackend(InMemoryBackend):
    """Fails the first ``failures`` upserts."""

    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures
        self.calls = 0

    def upsert_entry(self, data):
        self.calls += 1
        if self.calls <= self.failures:
            raise PersistenceError("Save entry failed: connection lost")
        super().upsert_entry(data)


def test_backoff_doubles():
    assert [backoff_delay(n, 0.5) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]
    with pytest.raises(ValueError):
        backoff_delay(0, 1.0)


def test_commands_replay_in_order():
    backend = InMemoryBackend()
    q = WriteQueue(backend)
    q.submit(WriteKind.UPSERT_ENTRY, {"id": "x", "person_name": "A", "created_at": 1})
    q.submit(WriteKind.DELETE_ENTRY, "x")
    q.submit(WriteKind.SAVE_SETTINGS, {"people": ["A"]})

    assert q.status == SyncStatus.PENDING
    assert q.drain() == 3
    assert backend.load_entries() == []
    assert backend.load_settings() == {"people": ["A"]}
    assert q.status == SyncStatus.SYNCED


def test_failure_without_retries_is_dropped_and_reported():
    backend = FlakyBackend(failures=1)
    q = WriteQueue(backend, max_retries=0)
    q.submit(WriteKind.UPSERT_ENTRY, {"id": "x"})

    assert q.drain() == 0
    assert q.status == SyncStatus.FAILED
    snap = q.snapshot()
    assert snap["dropped"] == 1
    assert "connection lost" in snap["last_error"]
    assert backend.load_entries() == []

    q.reset_failures()
    assert q.status == SyncStatus.SYNCED


def test_retries_with_backoff_then_succeeds():
    backend = FlakyBackend(failures=2)
    sleeps = []
    q = WriteQueue(backend, max_retries=3, backoff_seconds=1.0, sleep=sleeps.append)
    q.submit(WriteKind.UPSERT_ENTRY, {"id": "x"})

    assert q.drain() == 1
    assert sleeps == [1.0, 2.0]
    assert [e["id"] for e in backend.load_entries()] == ["x"]
    assert q.status == SyncStatus.SYNCED


def test_gives_up_after_max_retries():
    backend = FlakyBackend(failures=10)
    sleeps = []
    q = WriteQueue(backend, max_retries=2, backoff_seconds=0.1, sleep=sleeps.append)
    q.submit(WriteKind.UPSERT_ENTRY, {"id": "x"})

    assert q.drain() == 0
    assert backend.calls == 3
    assert len(sleeps) == 2
    assert q.status == SyncStatus.FAILED


def test_idle_callback_fires_after_drain():
    calls = []
    q = WriteQueue(InMemoryBackend())
    q.set_idle_callback(lambda: calls.append(True))
    q.submit(WriteKind.DELETE_ENTRY, "missing")
    q.drain()
    assert calls == [True]


def test_background_worker_applies_writes():
    backend = InMemoryBackend()
    q = WriteQueue(backend)
    q.start()
    try:
        q.submit(WriteKind.SAVE_SETTINGS, {"jobs": ["J"]})
    finally:
        q.stop()
    assert backend.load_settings() == {"jobs": ["J"]}
    assert not q.has_pending
