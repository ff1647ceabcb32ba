from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, Sequence

EntriesListener = Callable[[Sequence[dict]], Optional[bool]]
SettingsListener = Callable[[dict], Optional[bool]]
Unsubscribe = Callable[[], None]


class PersistenceBackend(Protocol):
    """Storage collaborator: two named collections, ``entries`` and ``settings``.

    Implementations raise ``PersistenceError`` for any storage failure.
    Listeners may return ``False`` to ask for the same push again later.
    """

    def load_entries(self) -> Sequence[dict]:
        raise NotImplementedError

    def load_settings(self) -> Optional[dict]:
        raise NotImplementedError

    def upsert_entry(self, data: dict) -> None:
        raise NotImplementedError

    def delete_entry(self, entry_id: str) -> None:
        raise NotImplementedError

    def save_settings(self, data: dict[str, Any]) -> None:
        """Merge ``data`` into the stored settings document."""

        raise NotImplementedError

    def subscribe(self, on_entries: EntriesListener, on_settings: SettingsListener) -> Unsubscribe:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError
