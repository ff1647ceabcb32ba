from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DailySummary:
    """Minutes and job sites for one person on one date."""

    date: str
    duration_mins: float = 0.0
    job_names: list[str] = field(default_factory=list)
    entry_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PersonReport:
    person_name: str
    daily_summaries: list[DailySummary]
    total_mins: float
    all_ids: list[str]
