from __future__ import annotations

from datetime import date

from timesheet_tracker.entries.model import TimeEntry
from timesheet_tracker.reports.service import build_report


def _e(entry_id, person, day, minutes, job="Site A", created_at=0):
    return TimeEntry(
        id=entry_id,
        person_name=person,
        job_name=job,
        date=day,
        clock_in="08:00",
        clock_out="09:00",
        created_at=created_at,
        duration_mins=minutes,
    )


SAMPLE = [
    _e("a1", "Alice", "2024-01-01", 60),
    _e("a2", "Alice", "2024-01-01", 30, job="Site B"),
    _e("b1", "Bob", "2024-01-02", 45),
]


def test_groups_by_person_and_day():
    reports = build_report(SAMPLE)

    assert [r.person_name for r in reports] == ["Alice", "Bob"]
    alice = reports[0]
    assert len(alice.daily_summaries) == 1
    day = alice.daily_summaries[0]
    assert day.date == "2024-01-01"
    assert day.duration_mins == 90
    assert day.job_names == ["Site A", "Site B"]
    assert sorted(day.entry_ids) == ["a1", "a2"]
    assert alice.total_mins == 90
    assert sorted(alice.all_ids) == ["a1", "a2"]


def test_job_names_are_distinct():
    reports = build_report([_e("1", "Al", "2024-01-01", 10), _e("2", "Al", "2024-01-01", 10)])
    assert reports[0].daily_summaries[0].job_names == ["Site A"]


def test_days_sorted_ascending():
    entries = [
        _e("3", "Al", "2024-01-03", 10),
        _e("1", "Al", "2024-01-01", 10),
        _e("2", "Al", "2024-01-02", 10),
    ]
    days = [d.date for d in build_report(entries)[0].daily_summaries]
    assert days == ["2024-01-01", "2024-01-02", "2024-01-03"]


def test_person_filter():
    assert [r.person_name for r in build_report(SAMPLE, person="Bob")] == ["Bob"]
    assert [r.person_name for r in build_report(SAMPLE, person="All")] == ["Alice", "Bob"]
    assert build_report(SAMPLE, person="Carol") == []


def test_inclusive_date_range_with_open_bounds():
    assert [r.person_name for r in build_report(SAMPLE, start=date(2024, 1, 2))] == ["Bob"]
    assert [r.person_name for r in build_report(SAMPLE, end=date(2024, 1, 1))] == ["Alice"]
    both = build_report(SAMPLE, start=date(2024, 1, 1), end=date(2024, 1, 2))
    assert [r.person_name for r in both] == ["Alice", "Bob"]


def test_persons_sorted_case_insensitively():
    entries = [_e("1", "bob", "2024-01-01", 1), _e("2", "Alice", "2024-01-01", 1), _e("3", "Carl", "2024-01-01", 1)]
    assert [r.person_name for r in build_report(entries)] == ["Alice", "bob", "Carl"]


def test_empty_input_gives_empty_report():
    assert build_report([]) == []


def test_approve_removes_exactly_the_given_entries(container):
    svc = container.entry_service
    for e in SAMPLE:
        svc.save(e)

    reports = container.report_service.build()
    removed = container.report_service.approve(reports[0].all_ids)

    assert removed == 2
    assert [e.id for e in svc.list_entries()] == ["b1"]


def test_approve_person(container, backend):
    svc = container.entry_service
    for e in SAMPLE:
        svc.save(e)

    reports = container.report_service.build()
    assert container.report_service.approve_person(reports, "Bob") == 1
    assert container.report_service.approve_person(reports, "Nobody") == 0

    container.write_queue.drain()
    assert sorted(e["id"] for e in backend.load_entries()) == ["a1", "a2"]


def test_accented_names_sort_with_their_base_letter():
    entries = [_e("1", "Zoe", "2024-01-01", 1), _e("2", "Émile", "2024-01-01", 1), _e("3", "adam", "2024-01-01", 1)]
    assert [r.person_name for r in build_report(entries)] == ["adam", "Émile", "Zoe"]


def test_accent_only_differences_keep_a_stable_order():
    entries = [_e("1", "Elise", "2024-01-01", 1), _e("2", "Élise", "2024-01-01", 1), _e("3", "elise", "2024-01-01", 1)]
    assert [r.person_name for r in build_report(entries)] == ["Elise", "elise", "Élise"]
