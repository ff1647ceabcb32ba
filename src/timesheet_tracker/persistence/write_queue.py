"""Ordered queue of pending backend writes.

Callers enqueue and return immediately; a background worker (or an explicit
``drain()``) replays the commands against the backend in FIFO order. A failed
write is retried with exponential backoff up to ``max_retries`` times, then
dropped and counted so the divergence is visible through ``status``.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from ..core.constants import WRITE_BACKOFF_SECONDS, WRITE_MAX_RETRIES
from ..core.enums import SyncStatus, WriteKind
from .backend import PersistenceBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteCommand:
    kind: WriteKind
    payload: Any
    attempts: int = 0


def backoff_delay(attempt: int, base_delay: float) -> float:
    """base_delay * 2 ** (attempt - 1) for a 1-indexed attempt."""
    if attempt < 1:
        raise ValueError("Attempt number must be 1 or greater")
    return base_delay * (2 ** (attempt - 1))


class WriteQueue:
    def __init__(
        self,
        backend: PersistenceBackend,
        *,
        max_retries: int = WRITE_MAX_RETRIES,
        backoff_seconds: float = WRITE_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._backend = backend
        self._max_retries = max(0, int(max_retries))
        self._backoff = float(backoff_seconds)
        self._sleep = sleep
        self._on_idle: Optional[Callable[[], None]] = None

        self._pending: deque[WriteCommand] = deque()
        self._cond = threading.Condition()
        self._in_flight = False
        self._dropped = 0
        self._last_error: Optional[str] = None
        self._worker: Optional[threading.Thread] = None
        self._stopping = False

    def set_idle_callback(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_idle = callback

    def submit(self, kind: WriteKind, payload: Any) -> None:
        with self._cond:
            self._pending.append(WriteCommand(kind=kind, payload=payload))
            self._cond.notify()

    @property
    def has_pending(self) -> bool:
        with self._cond:
            return bool(self._pending) or self._in_flight

    @property
    def status(self) -> SyncStatus:
        with self._cond:
            if self._dropped:
                return SyncStatus.FAILED
            if self._pending or self._in_flight:
                return SyncStatus.PENDING
            return SyncStatus.SYNCED

    def snapshot(self) -> dict:
        with self._cond:
            pending = len(self._pending) + (1 if self._in_flight else 0)
            dropped = self._dropped
            last_error = self._last_error
        return {
            "status": self.status.value,
            "pending": pending,
            "dropped": dropped,
            "last_error": last_error,
        }

    def reset_failures(self) -> None:
        with self._cond:
            self._dropped = 0
            self._last_error = None

    def drain(self) -> int:
        """Apply every queued command on the calling thread; returns how many succeeded."""
        applied = 0
        while True:
            with self._cond:
                if not self._pending:
                    break
                command = self._pending.popleft()
                self._in_flight = True
            try:
                if self._apply(command):
                    applied += 1
            finally:
                with self._cond:
                    self._in_flight = False
        self._notify_idle()
        return applied

    def _notify_idle(self) -> None:
        if self._on_idle and not self.has_pending:
            self._on_idle()

    def _apply(self, command: WriteCommand) -> bool:
        while True:
            try:
                self._dispatch(command)
                return True
            except Exception as exc:
                attempt = command.attempts + 1
                if attempt <= self._max_retries:
                    delay = backoff_delay(attempt, self._backoff)
                    logger.warning(
                        "Write %s failed (attempt %d/%d), retrying in %.1fs: %s",
                        command.kind.value, attempt, self._max_retries, delay, exc,
                    )
                    self._sleep(delay)
                    command = replace(command, attempts=attempt)
                    continue

                logger.error("Write %s failed, giving up: %s", command.kind.value, exc)
                with self._cond:
                    self._dropped += 1
                    self._last_error = str(exc)
                return False

    def _dispatch(self, command: WriteCommand) -> None:
        if command.kind == WriteKind.UPSERT_ENTRY:
            self._backend.upsert_entry(command.payload)
        elif command.kind == WriteKind.DELETE_ENTRY:
            self._backend.delete_entry(command.payload)
        elif command.kind == WriteKind.SAVE_SETTINGS:
            self._backend.save_settings(command.payload)
        else:
            raise ValueError(f"Unknown write kind: {command.kind!r}")

    def start(self) -> None:
        if self._worker and self._worker.is_alive():
            return
        self._stopping = False
        self._worker = threading.Thread(target=self._run, name="timesheet-write-queue", daemon=True)
        self._worker.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
        if self._worker:
            self._worker.join(timeout)
            self._worker = None

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._pending and not self._stopping:
                    self._cond.wait()
                if self._stopping and not self._pending:
                    return
            self.drain()
