"""Bulk paste import.

Expected line format::

    John | 2026-02-01 | 08:00-17:00 | lunch

Lunch is detected by a loose substring match over the whole line (``lunch``,
``break``, ``30``, ``30min``, ``0:30``), so unrelated text containing "30"
also triggers the deduction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..common.datetime_utils import duration_minutes, epoch_ms
from ..core.constants import BULK_IMPORT_JOB
from ..core.exceptions import ParseError
from ..entries.model import TimeEntry, new_entry_id
from ..entries.validator import validate_entry

LUNCH_RE = re.compile(r"lunch|break|30|30min|0:30")
RANGE_SEPARATOR_RE = re.compile(r"[-–—]")
DEFAULT_TIME = "00:00"


@dataclass(frozen=True)
class ParsedLine:
    line: str
    entry: Optional[TimeEntry]
    error: Optional[str]

    @property
    def importable(self) -> bool:
        return self.entry is not None and self.error is None


def format_error(line: str) -> str:
    return f'Invalid format: "{line[:30]}..."'


def parse_line_strict(line: str, *, now_ms: Optional[int] = None) -> TimeEntry:
    """Build the candidate entry for one line; raises ParseError on too few fields."""
    parts = [p.strip() for p in line.split("|")]
    if len(parts) < 3:
        raise ParseError(format_error(line))

    name, day, time_range = parts[0], parts[1], parts[2]
    has_lunch = bool(LUNCH_RE.search(line.lower()))

    halves = [t.strip() for t in RANGE_SEPARATOR_RE.split(time_range)]
    clock_in = halves[0] if halves and halves[0] else DEFAULT_TIME
    clock_out = halves[1] if len(halves) > 1 and halves[1] else DEFAULT_TIME

    return TimeEntry(
        id=new_entry_id(),
        person_name=name,
        job_name=BULK_IMPORT_JOB,
        date=day,
        clock_in=clock_in,
        clock_out=clock_out,
        lunch_30_min=has_lunch,
        notes=f"Bulk imported line: {line}",
        created_at=now_ms if now_ms is not None else epoch_ms(),
        duration_mins=duration_minutes(clock_in, clock_out, has_lunch),
    )


def parse_line(line: str, *, now_ms: Optional[int] = None) -> ParsedLine:
    try:
        entry = parse_line_strict(line, now_ms=now_ms)
    except ParseError as exc:
        return ParsedLine(line=line, entry=None, error=str(exc))
    return ParsedLine(line=line, entry=entry, error=validate_entry(entry))


def parse_text(text: str, *, now_ms: Optional[int] = None) -> list[ParsedLine]:
    """One result per non-blank line, in input order."""
    now_ms = now_ms if now_ms is not None else epoch_ms()
    return [parse_line(line, now_ms=now_ms) for line in (text or "").splitlines() if line.strip()]


def importable_entries(results: list[ParsedLine]) -> list[TimeEntry]:
    return [r.entry for r in results if r.importable]
