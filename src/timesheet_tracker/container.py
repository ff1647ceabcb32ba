from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .bulk.service import BulkImportService
from .common.datetime_utils import set_operating_timezone
from .core.constants import OPERATING_TIMEZONE, POLL_INTERVAL_SECONDS, WRITE_BACKOFF_SECONDS, WRITE_MAX_RETRIES
from .core.enums import StorageBackend
from .core.exceptions import ConfigurationError
from .database.connection import DBConfig, DatabaseConnection
from .entries.service import EntryService
from .persistence.backend import PersistenceBackend
from .persistence.memory_backend import InMemoryBackend
from .persistence.mysql_backend import MySQLBackend
from .persistence.write_queue import WriteQueue
from .reports.service import ReportService
from .roster.service import RosterService
from .sessions.service import SessionService
from .state import StateStore


@dataclass(frozen=True)
class Container:
    backend: PersistenceBackend
    write_queue: WriteQueue
    store: StateStore

    entry_service: EntryService
    roster_service: RosterService
    session_service: SessionService
    report_service: ReportService
    bulk_import_service: BulkImportService

    def shutdown(self) -> None:
        self.store.stop_sync()
        self.write_queue.stop()
        self.write_queue.drain()
        self.backend.close()


def build_backend(storage: str, *, db_config: Optional[Mapping[str, Any]] = None, poll_interval: float = POLL_INTERVAL_SECONDS) -> PersistenceBackend:
    try:
        kind = StorageBackend(str(storage).lower())
    except ValueError:
        raise ConfigurationError(f"Unknown storage backend: {storage!r}")

    if kind == StorageBackend.MYSQL:
        if not db_config:
            raise ConfigurationError("STORAGE_BACKEND=mysql requires DB_CONFIG")
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
        return MySQLBackend(conn, poll_interval=poll_interval)
    return InMemoryBackend()


def build_container(
    *,
    backend: PersistenceBackend,
    timezone: str = OPERATING_TIMEZONE,
    write_max_retries: int = WRITE_MAX_RETRIES,
    write_backoff_seconds: float = WRITE_BACKOFF_SECONDS,
    strict_clock_in: bool = False,
    start_workers: bool = True,
) -> Container:
    set_operating_timezone(timezone)

    write_queue = WriteQueue(backend, max_retries=write_max_retries, backoff_seconds=write_backoff_seconds)
    store = StateStore(backend, write_queue)
    store.load()

    entry_service = EntryService(store)
    roster_service = RosterService(store)
    session_service = SessionService(store, entry_service, roster_service, strict_clock_in=strict_clock_in)
    report_service = ReportService(entry_service)
    bulk_import_service = BulkImportService(entry_service)

    if start_workers:
        write_queue.start()
        store.start_sync()

    return Container(
        backend=backend,
        write_queue=write_queue,
        store=store,
        entry_service=entry_service,
        roster_service=roster_service,
        session_service=session_service,
        report_service=report_service,
        bulk_import_service=bulk_import_service,
    )
