"""Structural and temporal checks for a single time entry.

Rules run in a fixed order and only the first failure is reported.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from ..common.datetime_utils import parse_time_of_day
from ..core.exceptions import ValidationError
from .model import TimeEntry

EntryCandidate = Union[TimeEntry, Mapping[str, Any]]


def _field(candidate: EntryCandidate, name: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


def validate_entry(candidate: EntryCandidate) -> Optional[str]:
    """Return None when valid, else the first failing rule's message."""
    if not _field(candidate, "person_name"):
        return "Worker name is required"
    if not _field(candidate, "date"):
        return "Date is required"

    clock_in = _field(candidate, "clock_in")
    clock_out = _field(candidate, "clock_out")
    if not clock_in:
        return "Clock-in time is required"
    if not clock_out:
        return "Clock-out time is required"

    start = parse_time_of_day(str(clock_in))
    end = parse_time_of_day(str(clock_out))
    if start is None:
        return "Invalid clock-in time"
    if end is None:
        return "Invalid clock-out time"
    if end <= start:
        return "Clock-out must be after clock-in"

    return None


def ensure_valid(candidate: EntryCandidate) -> None:
    error = validate_entry(candidate)
    if error:
        raise ValidationError(error)
