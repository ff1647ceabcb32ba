from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import epoch_ms
from ..core.constants import ALL_PEOPLE
from ..state import StateStore
from .model import TimeEntry, new_entry_id
from .validator import ensure_valid


def newest_first(entries: Iterable[TimeEntry]) -> list[TimeEntry]:
    return sorted(entries, key=lambda e: e.created_at, reverse=True)


class EntryService:
    """The closed-entry set: save, delete, list."""

    def __init__(self, store: StateStore):
        self._store = store

    def get(self, entry_id: str) -> Optional[TimeEntry]:
        return self._store.get_entry(entry_id)

    def list_entries(self) -> list[TimeEntry]:
        return newest_first(self._store.entries())

    def search(self, term: str = "", person: Optional[str] = None) -> list[TimeEntry]:
        needle = (term or "").lower()
        out = []
        for e in self._store.entries():
            if person and person != ALL_PEOPLE and e.person_name != person:
                continue
            if needle and not (
                needle in e.person_name.lower() or needle in e.job_name.lower() or needle in e.notes.lower()
            ):
                continue
            out.append(e)
        return newest_first(out)

    def prepare(self, entry: TimeEntry, *, now_ms: Optional[int] = None) -> TimeEntry:
        """Validate, fill id/created_at and recompute the cached duration."""
        ensure_valid(entry)
        entry = replace(
            entry,
            id=entry.id or new_entry_id(),
            created_at=entry.created_at or (now_ms if now_ms is not None else epoch_ms()),
        )
        return entry.recomputed()

    def save(self, entry: TimeEntry) -> TimeEntry:
        """Insert or fully replace by id."""
        entry = self.prepare(entry)
        self._store.put_entry(entry)
        return entry

    def add_many(self, entries: Sequence[TimeEntry]) -> int:
        """Append already-validated entries as they are (bulk import, clock-out)."""
        return self._store.put_entries(entries)

    def record(self, entry: TimeEntry) -> TimeEntry:
        self._store.put_entry(entry)
        return entry

    def remove(self, entry_id: str) -> bool:
        return self._store.delete_entries([entry_id]) == 1

    def remove_many(self, ids: Iterable[str]) -> int:
        return self._store.delete_entries(ids)

    def minutes_for(self, person: str, date: str) -> float:
        return sum(e.duration_mins for e in self._store.iter_entries_for(person, date))
