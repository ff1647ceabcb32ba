from __future__ import annotations

from ..common.validators import clean_name
from ..state import StateStore


class RosterService:
    """People and job registries: sorted, distinct, add-only."""

    def __init__(self, store: StateStore):
        self._store = store

    def people(self) -> list[str]:
        return sorted(self._store.people())

    def jobs(self) -> list[str]:
        return sorted(self._store.jobs())

    def add_person(self, name: str) -> bool:
        name = clean_name(name)
        with self._store.lock:
            current = self._store.people()
            if not name or name in current:
                return False
            self._store.set_people(sorted([*current, name]))
        return True

    def add_job(self, name: str) -> bool:
        name = clean_name(name)
        with self._store.lock:
            current = self._store.jobs()
            if not name or name in current:
                return False
            self._store.set_jobs(sorted([*current, name]))
        return True
