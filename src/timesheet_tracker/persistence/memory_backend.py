from __future__ import annotations

import copy
import threading
from typing import Any, Optional, Sequence

from .backend import EntriesListener, SettingsListener, Unsubscribe


def _created_at_key(entry: dict) -> float:
    try:
        return float(entry.get("created_at") or 0)
    except (TypeError, ValueError):
        return 0.0


class InMemoryBackend:
    """Process-local storage.

    Own writes are not echoed back to subscribers; ``push_entries`` and
    ``push_settings`` simulate updates arriving from another device.
    """

    def __init__(self, *, entries: Sequence[dict] = (), settings: Optional[dict] = None):
        self._lock = threading.Lock()
        self._entries: dict[str, dict] = {str(e["id"]): dict(e) for e in entries}
        self._settings: Optional[dict] = dict(settings) if settings is not None else None
        self._listeners: list[tuple[EntriesListener, SettingsListener]] = []

    def load_entries(self) -> Sequence[dict]:
        with self._lock:
            items = [copy.deepcopy(e) for e in self._entries.values()]
        items.sort(key=_created_at_key, reverse=True)
        return items

    def load_settings(self) -> Optional[dict]:
        with self._lock:
            return copy.deepcopy(self._settings) if self._settings is not None else None

    def upsert_entry(self, data: dict) -> None:
        with self._lock:
            current = self._entries.get(str(data["id"]), {})
            self._entries[str(data["id"])] = {**current, **copy.deepcopy(data)}

    def delete_entry(self, entry_id: str) -> None:
        with self._lock:
            self._entries.pop(str(entry_id), None)

    def save_settings(self, data: dict[str, Any]) -> None:
        with self._lock:
            self._settings = {**(self._settings or {}), **copy.deepcopy(data)}

    def subscribe(self, on_entries: EntriesListener, on_settings: SettingsListener) -> Unsubscribe:
        pair = (on_entries, on_settings)
        with self._lock:
            self._listeners.append(pair)

        def unsubscribe() -> None:
            with self._lock:
                if pair in self._listeners:
                    self._listeners.remove(pair)

        return unsubscribe

    def push_entries(self, entries: Sequence[dict]) -> None:
        with self._lock:
            self._entries = {str(e["id"]): dict(e) for e in entries}
            listeners = list(self._listeners)
        snapshot = self.load_entries()
        for on_entries, _ in listeners:
            on_entries(snapshot)

    def push_settings(self, settings: dict) -> None:
        with self._lock:
            self._settings = dict(settings)
            listeners = list(self._listeners)
        for _, on_settings in listeners:
            on_settings(copy.deepcopy(settings))

    def close(self) -> None:
        with self._lock:
            self._listeners.clear()
