from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class ActiveSession:
    """An open clock-in for one worker.

    ``accumulated_ms_before`` is a snapshot of the worker's closed minutes for
    the day taken at clock-in; live elapsed time is always recomputed from the
    stored entries instead.
    """

    person_name: str
    job_name: str
    start_time: int
    accumulated_ms_before: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "person_name": self.person_name,
            "job_name": self.job_name,
            "startTime": self.start_time,
            "accumulatedMsBeforeThisSession": self.accumulated_ms_before,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActiveSession":
        return cls(
            person_name=str(data["person_name"]),
            job_name=str(data.get("job_name") or ""),
            start_time=int(data["startTime"]),
            accumulated_ms_before=float(data.get("accumulatedMsBeforeThisSession") or 0),
        )


@dataclass(frozen=True)
class DashboardRow:
    """Read-model for the live dashboard."""

    person_name: str
    is_active: bool
    job_name: str
    elapsed_minutes: float
    elapsed: str
