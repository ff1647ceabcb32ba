from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import duration_minutes


def new_entry_id() -> str:
    return uuid.uuid4().hex


def _as_number(value: Any, kind: Callable[[Any], Any]) -> Optional[Any]:
    """``kind(value)``, or None when the stored value is missing or unreadable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return kind(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one completed work record."""

    id: str
    person_name: str
    job_name: str
    date: str
    clock_in: str
    clock_out: str
    lunch_30_min: bool = False
    notes: str = ""
    created_at: int = 0
    duration_mins: float = 0.0

    def recomputed(self) -> "TimeEntry":
        """Copy with ``duration_mins`` derived from the clock times and lunch flag."""
        return replace(self, duration_mins=duration_minutes(self.clock_in, self.clock_out, self.lunch_30_min))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimeEntry":
        clock_in = str(data.get("clock_in") or "")
        clock_out = str(data.get("clock_out") or "")
        lunch = bool(data.get("lunch_30_min", False))

        duration = _as_number(data.get("duration_mins"), float)
        if duration is None:
            duration = duration_minutes(clock_in, clock_out, lunch)

        return cls(
            id=str(data.get("id") or new_entry_id()),
            person_name=str(data.get("person_name") or ""),
            job_name=str(data.get("job_name") or ""),
            date=str(data.get("date") or ""),
            clock_in=clock_in,
            clock_out=clock_out,
            lunch_30_min=lunch,
            notes=str(data.get("notes") or ""),
            created_at=_as_number(data.get("created_at"), int) or 0,
            duration_mins=duration,
        )
