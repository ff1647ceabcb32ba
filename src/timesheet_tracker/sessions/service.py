from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import (
    current_time_of_day,
    epoch_ms,
    iso_date,
    minutes_to_hours_string,
    now_local,
    time_of_day_from_epoch_ms,
)
from ..common.validators import clean_name, require_non_empty
from ..core.exceptions import ValidationError
from ..entries.model import TimeEntry, new_entry_id
from ..entries.service import EntryService
from ..roster.service import RosterService
from ..state import StateStore
from .model import ActiveSession, DashboardRow

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60 * 1000


class SessionService:
    """Clock-in/clock-out and live elapsed time per worker."""

    def __init__(
        self,
        store: StateStore,
        entries: EntryService,
        roster: RosterService,
        *,
        strict_clock_in: bool = False,
    ):
        self._store = store
        self._entries = entries
        self._roster = roster
        self._strict = bool(strict_clock_in)

    def is_active(self, person: str) -> bool:
        return self._store.session_for(person) is not None

    def active_session(self, person: str) -> Optional[ActiveSession]:
        return self._store.session_for(person)

    def clock_in(self, person: str, job: str, *, now: datetime | None = None) -> ActiveSession:
        person = require_non_empty(person, "Worker name")
        job = clean_name(job)
        now = now or now_local()

        with self._store.lock:
            previous = self._store.session_for(person)
            if previous is not None:
                if self._strict:
                    raise ValidationError(f"{person} is already clocked in")
                logger.warning(
                    "Clock-in for %s replaces open session started at %s", person, previous.start_time
                )

            accumulated_mins = self._entries.minutes_for(person, iso_date(now))
            session = ActiveSession(
                person_name=person,
                job_name=job,
                start_time=epoch_ms(now),
                accumulated_ms_before=accumulated_mins * MS_PER_MINUTE,
            )
            self._roster.add_person(person)
            self._roster.add_job(job)
            self._store.set_session(session)
        return session

    def clock_out(self, person: str, *, now: datetime | None = None) -> Optional[TimeEntry]:
        person = clean_name(person)
        now = now or now_local()

        with self._store.lock:
            session = self._store.session_for(person)
            if session is None:
                return None

            end_ms = epoch_ms(now)
            # Not clamped: clock skew may make this negative.
            duration = (end_ms - session.start_time) / MS_PER_MINUTE

            entry = TimeEntry(
                id=new_entry_id(),
                person_name=person,
                job_name=session.job_name,
                date=iso_date(now),
                clock_in=time_of_day_from_epoch_ms(session.start_time),
                clock_out=current_time_of_day(now),
                lunch_30_min=False,
                notes=f"Session: {session.job_name}",
                created_at=end_ms,
                duration_mins=duration,
            )
            self._entries.record(entry)
            self._store.clear_session(person)
        return entry

    def live_elapsed(self, person: str, *, now: datetime | None = None) -> float:
        """Minutes worked today including the open session; read-only."""
        now = now or now_local()
        closed = self._entries.minutes_for(person, iso_date(now))
        session = self._store.session_for(person)
        if session is None:
            return closed
        return closed + (epoch_ms(now) - session.start_time) / MS_PER_MINUTE

    def dashboard(self, *, now: datetime | None = None) -> list[DashboardRow]:
        now = now or now_local()
        rows = []
        for person in self._roster.people():
            session = self._store.session_for(person)
            minutes = self.live_elapsed(person, now=now)
            rows.append(
                DashboardRow(
                    person_name=person,
                    is_active=session is not None,
                    job_name=session.job_name if session else "",
                    elapsed_minutes=minutes,
                    elapsed=minutes_to_hours_string(minutes),
                )
            )
        return rows
