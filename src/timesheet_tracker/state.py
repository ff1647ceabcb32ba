"""Application state and its synchronisation with the storage backend.

``AppState`` is the single explicit holder of entries, people, jobs and open
sessions. ``StateStore`` owns it: every mutation happens under one lock,
updates the in-memory copy first, then enqueues the matching backend write.
Pushes from the backend replace a whole collection (last write wins).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from .common.datetime_utils import epoch_ms
from .core.constants import DEFAULT_JOBS
from .core.enums import WriteKind
from .core.exceptions import PersistenceError
from .entries.model import TimeEntry
from .persistence.backend import PersistenceBackend, Unsubscribe
from .persistence.write_queue import WriteQueue
from .sessions.model import ActiveSession

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    entries: dict[str, TimeEntry] = field(default_factory=dict)
    people: list[str] = field(default_factory=list)
    jobs: list[str] = field(default_factory=lambda: list(DEFAULT_JOBS))
    active_sessions: dict[str, ActiveSession] = field(default_factory=dict)


def parse_entries(rows: Iterable[Any]) -> dict[str, TimeEntry]:
    out: dict[str, TimeEntry] = {}
    for row in rows or []:
        if not isinstance(row, Mapping):
            logger.warning("Skipping stored entry that is not a mapping: %r", row)
            continue
        try:
            entry = TimeEntry.from_dict(row)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed stored entry %r: %s", row.get("id"), exc)
            continue
        out[entry.id] = entry
    return out


def parse_settings(data: Optional[Mapping[str, Any]]) -> tuple[list[str], list[str], dict[str, ActiveSession]]:
    """people, jobs, sessions from a settings document; bad fields fall back to defaults."""
    data = data or {}

    people = data.get("people")
    people = [str(p) for p in people] if isinstance(people, list) else []

    jobs = data.get("jobs")
    jobs = [str(j) for j in jobs] if isinstance(jobs, list) else list(DEFAULT_JOBS)

    sessions: dict[str, ActiveSession] = {}
    raw_sessions = data.get("activeSessions")
    if isinstance(raw_sessions, Mapping):
        for person, raw in raw_sessions.items():
            try:
                sessions[str(person)] = ActiveSession.from_dict(raw)
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed active session for %r", person)
    return people, jobs, sessions


class StateStore:
    def __init__(self, backend: PersistenceBackend, queue: WriteQueue, *, state: Optional[AppState] = None):
        self._backend = backend
        self._queue = queue
        self._state = state or AppState()
        self._lock = threading.RLock()
        self._unsubscribe: Optional[Unsubscribe] = None
        self._deferred = False
        self._queue.set_idle_callback(self._on_queue_idle)

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def queue(self) -> WriteQueue:
        return self._queue

    # -- loading / subscription -------------------------------------------

    def load(self) -> None:
        """Initial full read; a failing backend leaves the defaults in place."""
        try:
            rows = self._backend.load_entries()
            settings = self._backend.load_settings()
        except PersistenceError as exc:
            logger.error("Initial load failed, starting empty: %s", exc)
            return
        self.apply_remote_entries(rows)
        self.apply_remote_settings(settings or {})

    def start_sync(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._backend.subscribe(self.apply_remote_entries, self.apply_remote_settings)

    def stop_sync(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def apply_remote_entries(self, rows: Sequence[dict]) -> bool:
        entries = parse_entries(rows)
        with self._lock:
            # Local writes still queued are newer than this copy.
            if self._queue.has_pending:
                self._deferred = True
                return False
            self._state.entries = entries
        return True

    def apply_remote_settings(self, data: Mapping[str, Any]) -> bool:
        people, jobs, sessions = parse_settings(data)
        with self._lock:
            if self._queue.has_pending:
                self._deferred = True
                return False
            self._state.people = people
            self._state.jobs = jobs
            self._state.active_sessions = sessions
        return True

    def _on_queue_idle(self) -> None:
        with self._lock:
            deferred, self._deferred = self._deferred, False
        if deferred:
            self.load()

    # -- reads ------------------------------------------------------------

    def entries(self) -> list[TimeEntry]:
        with self._lock:
            return list(self._state.entries.values())

    def get_entry(self, entry_id: str) -> Optional[TimeEntry]:
        with self._lock:
            return self._state.entries.get(entry_id)

    def people(self) -> list[str]:
        with self._lock:
            return list(self._state.people)

    def jobs(self) -> list[str]:
        with self._lock:
            return list(self._state.jobs)

    def sessions(self) -> dict[str, ActiveSession]:
        with self._lock:
            return dict(self._state.active_sessions)

    def session_for(self, person: str) -> Optional[ActiveSession]:
        with self._lock:
            return self._state.active_sessions.get(person)

    # -- entry writes -----------------------------------------------------

    def put_entry(self, entry: TimeEntry) -> None:
        with self._lock:
            self._state.entries[entry.id] = entry
        self._queue.submit(WriteKind.UPSERT_ENTRY, entry.to_dict())

    def put_entries(self, entries: Iterable[TimeEntry]) -> int:
        count = 0
        with self._lock:
            for entry in entries:
                self.put_entry(entry)
                count += 1
        return count

    def delete_entries(self, ids: Iterable[str]) -> int:
        removed = 0
        with self._lock:
            for entry_id in ids:
                if self._state.entries.pop(entry_id, None) is None:
                    continue
                removed += 1
                self._queue.submit(WriteKind.DELETE_ENTRY, entry_id)
        return removed

    # -- settings writes --------------------------------------------------

    def set_people(self, people: Sequence[str]) -> None:
        with self._lock:
            self._state.people = list(people)
            self._persist_settings()

    def set_jobs(self, jobs: Sequence[str]) -> None:
        with self._lock:
            self._state.jobs = list(jobs)
            self._persist_settings()

    def set_session(self, session: ActiveSession) -> None:
        with self._lock:
            self._state.active_sessions[session.person_name] = session
            self._persist_settings()

    def clear_session(self, person: str) -> Optional[ActiveSession]:
        with self._lock:
            session = self._state.active_sessions.pop(person, None)
            if session is not None:
                self._persist_settings()
            return session

    def settings_document(self) -> dict[str, Any]:
        with self._lock:
            return {
                "people": list(self._state.people),
                "jobs": list(self._state.jobs),
                "activeSessions": {p: s.to_dict() for p, s in self._state.active_sessions.items()},
            }

    def _persist_settings(self) -> None:
        doc = self.settings_document()
        doc["updatedAt"] = epoch_ms()
        self._queue.submit(WriteKind.SAVE_SETTINGS, doc)

    def iter_entries_for(self, person: str, date: str) -> Iterator[TimeEntry]:
        with self._lock:
            items = [e for e in self._state.entries.values() if e.person_name == person and e.date == date]
        return iter(items)
