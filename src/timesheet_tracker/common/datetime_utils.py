from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_REPORT_DAYS, LUNCH_DEDUCTION_MINUTES, OPERATING_TIMEZONE

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")
_HOURS_RE = re.compile(r"^(\d+):(\d{2})$")

# Shared reference day for time-of-day arithmetic; only the difference matters.
_REFERENCE_DATE = date(2000, 1, 1)

_operating_tz = ZoneInfo(OPERATING_TIMEZONE)


def set_operating_timezone(name: str) -> None:
    """Switch the timezone used for every "today" decision."""
    global _operating_tz
    _operating_tz = ZoneInfo(name)


def now_local() -> datetime:
    """Current time in the operating timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(_operating_tz)


def _to_operating(now: Optional[datetime]) -> datetime:
    now = now or now_local()
    if now.tzinfo is None:
        return now.replace(tzinfo=_operating_tz)
    return now.astimezone(_operating_tz)


def current_date(now: Optional[datetime] = None) -> date:
    return _to_operating(now).date()


def current_time_of_day(now: Optional[datetime] = None) -> str:
    """24h ``HH:mm`` wall-clock time in the operating timezone."""
    return _to_operating(now).strftime("%H:%M")


def iso_date(now: Optional[datetime] = None) -> str:
    return current_date(now).isoformat()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def epoch_ms(dt: Optional[datetime] = None) -> int:
    dt = _to_operating(dt)
    return int(dt.timestamp() * 1000)


def from_epoch_ms(ms: float) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).astimezone(_operating_tz)


def time_of_day_from_epoch_ms(ms: float) -> str:
    return from_epoch_ms(ms).strftime("%H:%M")


def parse_time_of_day(value: Optional[str]) -> Optional[datetime]:
    """Anchor an ``HH:mm`` (or ``HH:mm:ss``) string on the reference day.

    Returns None when the value is not a valid 24h time.
    """
    if not value:
        return None
    m = _TIME_RE.match(value.strip())
    if not m:
        return None
    hours, minutes, seconds = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    return datetime(_REFERENCE_DATE.year, _REFERENCE_DATE.month, _REFERENCE_DATE.day, hours, minutes, seconds)


def to_12_hour(time24: str) -> str:
    """Format ``HH:mm`` (24h) as ``h:mm AM/PM``."""
    if not time24:
        return ""
    hours, _, minutes = time24.partition(":")
    try:
        h = int(hours)
    except ValueError:
        return time24
    ampm = "PM" if h >= 12 else "AM"
    h = h % 12 or 12
    return f"{h}:{minutes} {ampm}"


def duration_minutes(clock_in: str, clock_out: str, lunch: bool) -> float:
    """Worked minutes between two times of day, minus lunch, not below 0.

    Unparseable input yields 0.
    """
    start = parse_time_of_day(clock_in)
    end = parse_time_of_day(clock_out)
    if start is None or end is None:
        return 0.0

    diff = (end - start).total_seconds() / 60
    if lunch:
        diff -= LUNCH_DEDUCTION_MINUTES
    return max(0.0, diff)


def minutes_to_hours_string(total_minutes: float) -> str:
    negative = total_minutes < 0
    whole = int(abs(total_minutes))
    hours, mins = divmod(whole, 60)
    return f"{'-' if negative else ''}{hours}:{mins:02d}"


def hours_string_to_minutes(value: str) -> int:
    """Inverse of ``minutes_to_hours_string`` for non-negative values."""
    m = _HOURS_RE.match((value or "").strip())
    if not m or int(m.group(2)) > 59:
        raise ValueError(f"Invalid H:MM value: {value!r}")
    return int(m.group(1)) * 60 + int(m.group(2))


def format_date_short(value: str) -> str:
    """``2024-01-05`` -> ``Jan 05``; anything unparseable comes back as is."""
    try:
        return parse_iso_date(value).strftime("%b %d")
    except (TypeError, ValueError):
        return value


def format_date_label(value: str) -> str:
    """``2024-01-05`` -> ``Jan 5, 2024``."""
    try:
        d = parse_iso_date(value)
    except (TypeError, ValueError):
        return value
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def default_report_range(today: Optional[date] = None, *, days: int = DEFAULT_REPORT_DAYS) -> tuple[date, date]:
    today = today or current_date()
    return today - timedelta(days=days), today
