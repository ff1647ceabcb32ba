from __future__ import annotations

from enum import Enum


class SyncStatus(str, Enum):
    """State of the background write queue against the backend."""

    SYNCED = "SYNCED"
    PENDING = "PENDING"
    FAILED = "FAILED"


class WriteKind(str, Enum):
    """Commands the write queue knows how to replay against a backend."""

    UPSERT_ENTRY = "UPSERT_ENTRY"
    DELETE_ENTRY = "DELETE_ENTRY"
    SAVE_SETTINGS = "SAVE_SETTINGS"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
