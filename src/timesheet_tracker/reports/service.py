from __future__ import annotations

import unicodedata
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.constants import ALL_PEOPLE
from ..entries.model import TimeEntry
from ..entries.service import EntryService
from .model import DailySummary, PersonReport


def _entry_date(entry: TimeEntry) -> Optional[date]:
    try:
        return parse_iso_date(entry.date)
    except (TypeError, ValueError):
        return None


def _in_range(entry: TimeEntry, start: Optional[date], end: Optional[date]) -> bool:
    if start is None and end is None:
        return True
    d = _entry_date(entry)
    if d is None:
        return False
    if start is not None and d < start:
        return False
    if end is not None and d > end:
        return False
    return True


def _name_key(name: str) -> tuple[str, str, str]:
    # Accents only break ties, so accented names sort with their base letter.
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base, name.casefold(), name


def build_report(
    entries: Iterable[TimeEntry],
    *,
    person: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[PersonReport]:
    """Group entries into per-person, per-day summaries.

    ``person`` of None or "All" keeps every worker; ``start``/``end`` are
    inclusive calendar dates and either may be omitted.
    """
    by_person: dict[str, dict[str, DailySummary]] = {}

    for e in entries:
        if person and person != ALL_PEOPLE and e.person_name != person:
            continue
        if not _in_range(e, start, end):
            continue

        days = by_person.setdefault(e.person_name, {})
        day = days.get(e.date)
        if day is None:
            day = DailySummary(date=e.date)
            days[e.date] = day

        day.duration_mins += e.duration_mins
        day.entry_ids.append(e.id)
        if e.job_name not in day.job_names:
            day.job_names.append(e.job_name)

    reports = []
    for name, days in by_person.items():
        summaries = sorted(days.values(), key=lambda d: _entry_date_key(d.date))
        reports.append(
            PersonReport(
                person_name=name,
                daily_summaries=summaries,
                total_mins=sum(d.duration_mins for d in summaries),
                all_ids=[i for d in summaries for i in d.entry_ids],
            )
        )

    reports.sort(key=lambda r: _name_key(r.person_name))
    return reports


def _entry_date_key(value: str) -> tuple[int, str]:
    # Unparseable dates sort after real ones, in text order.
    try:
        return 0, parse_iso_date(value).isoformat()
    except (TypeError, ValueError):
        return 1, value


class ReportService:
    def __init__(self, entries: EntryService):
        self._entries = entries

    def build(
        self,
        *,
        person: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[PersonReport]:
        return build_report(self._entries.list_entries(), person=person, start=start, end=end)

    def approve(self, ids: Iterable[str]) -> int:
        """Finalize: permanently remove the given entries from the store."""
        return self._entries.remove_many(set(ids))

    def approve_person(self, reports: Sequence[PersonReport], person: str) -> int:
        for r in reports:
            if r.person_name == person:
                return self.approve(r.all_ids)
        return 0
