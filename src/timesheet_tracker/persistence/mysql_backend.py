from __future__ import annotations

import json
import logging
import threading
from typing import Any, Optional, Sequence

from ..common.datetime_utils import epoch_ms
from ..core.constants import POLL_INTERVAL_SECONDS
from ..core.exceptions import PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, storage_errors
from .backend import EntriesListener, SettingsListener, Unsubscribe

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"

_ENTRY_COLUMNS = (
    "id, person_name, job_name, entry_date, clock_in, clock_out, lunch_30_min, notes, created_at, duration_mins"
)


def _row_to_entry(r: dict) -> dict:
    return {
        "id": r["id"],
        "person_name": r["person_name"],
        "job_name": r.get("job_name") or "",
        "date": r["entry_date"],
        "clock_in": r["clock_in"],
        "clock_out": r["clock_out"],
        "lunch_30_min": bool(r.get("lunch_30_min")),
        "notes": r.get("notes") or "",
        "created_at": int(r.get("created_at") or 0),
        "duration_mins": float(r.get("duration_mins") or 0),
    }


class MySQLBackend:
    """Entries in ``time_entries``; settings as one JSON document in ``app_settings``.

    MySQL cannot push, so ``subscribe`` starts a thread that polls a cheap
    change fingerprint and pushes full collections when it moves.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, poll_interval: float = POLL_INTERVAL_SECONDS):
        self._conn_factory = conn_factory
        self._poll_interval = float(poll_interval)
        self._stop = threading.Event()
        self._poller: Optional[threading.Thread] = None

    def load_entries(self) -> Sequence[dict]:
        with storage_errors("Load entries"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM time_entries ORDER BY created_at DESC")
            return [_row_to_entry(r) for r in fetchall(cur)]

    def load_settings(self) -> Optional[dict]:
        with storage_errors("Load settings"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT document FROM app_settings WHERE settings_key=%s", (SETTINGS_KEY,))
            r = fetchone(cur)
        if not r:
            return None
        try:
            data = json.loads(r["document"])
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Settings document is not valid JSON: {exc}") from exc
        return data if isinstance(data, dict) else None

    def upsert_entry(self, data: dict) -> None:
        with storage_errors("Save entry"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO time_entries({_ENTRY_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    person_name=VALUES(person_name), job_name=VALUES(job_name),
                    entry_date=VALUES(entry_date), clock_in=VALUES(clock_in),
                    clock_out=VALUES(clock_out), lunch_30_min=VALUES(lunch_30_min),
                    notes=VALUES(notes), created_at=VALUES(created_at),
                    duration_mins=VALUES(duration_mins)
                """,
                (
                    data["id"],
                    data.get("person_name", ""),
                    data.get("job_name", ""),
                    data.get("date", ""),
                    data.get("clock_in", ""),
                    data.get("clock_out", ""),
                    1 if data.get("lunch_30_min") else 0,
                    data.get("notes", ""),
                    int(data.get("created_at") or 0),
                    float(data.get("duration_mins") or 0),
                ),
            )

    def delete_entry(self, entry_id: str) -> None:
        with storage_errors("Delete entry"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries WHERE id=%s", (entry_id,))

    def save_settings(self, data: dict[str, Any]) -> None:
        with storage_errors("Save settings"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT document FROM app_settings WHERE settings_key=%s FOR UPDATE",
                (SETTINGS_KEY,),
            )
            r = fetchone(cur)
            current: dict = {}
            if r:
                try:
                    loaded = json.loads(r["document"])
                    current = loaded if isinstance(loaded, dict) else {}
                except (TypeError, ValueError):
                    logger.warning("Replacing unreadable settings document")

            merged = {**current, **data}
            cur.execute(
                """
                INSERT INTO app_settings(settings_key, document, updated_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE document=VALUES(document), updated_at=VALUES(updated_at)
                """,
                (SETTINGS_KEY, json.dumps(merged), int(merged.get("updatedAt") or epoch_ms())),
            )

    def fingerprint(self) -> tuple:
        with storage_errors("Read change marker"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n,
                       COALESCE(BIT_XOR(CRC32(CONCAT(id, '|', updated_at))), 0) AS x
                FROM time_entries
                """
            )
            e = fetchone(cur) or {}
            cur.execute("SELECT updated_at FROM app_settings WHERE settings_key=%s", (SETTINGS_KEY,))
            s = fetchone(cur) or {}
        return (int(e.get("n") or 0), int(e.get("x") or 0)), int(s.get("updated_at") or 0)

    def subscribe(self, on_entries: EntriesListener, on_settings: SettingsListener) -> Unsubscribe:
        self._stop.clear()
        self._poller = threading.Thread(
            target=self._poll,
            args=(on_entries, on_settings),
            name="timesheet-mysql-poller",
            daemon=True,
        )
        self._poller.start()

        def unsubscribe() -> None:
            self._stop.set()

        return unsubscribe

    def _poll(self, on_entries: EntriesListener, on_settings: SettingsListener) -> None:
        seen_entries = seen_settings = None
        while not self._stop.wait(self._poll_interval):
            try:
                entries_mark, settings_mark = self.fingerprint()
                if entries_mark != seen_entries:
                    if on_entries(self.load_entries()) is not False:
                        seen_entries = entries_mark
                if settings_mark != seen_settings:
                    if on_settings(self.load_settings() or {}) is not False:
                        seen_settings = settings_mark
            except PersistenceError as exc:
                logger.error("Change poll failed: %s", exc)
            except Exception:
                # A listener failure must not end the subscription.
                logger.exception("Applying polled changes failed")

    def close(self) -> None:
        self._stop.set()
        if self._poller:
            self._poller.join(self._poll_interval + 1)
            self._poller = None
