from __future__ import annotations

from timesheet_tracker.core.constants import DEFAULT_JOBS


def test_default_jobs_on_empty_store(container):
    assert container.roster_service.jobs() == sorted(DEFAULT_JOBS)
    assert container.roster_service.people() == []


def test_add_person_trims_sorts_and_ignores_duplicates(container):
    roster = container.roster_service
    assert roster.add_person(" Zoe ") is True
    assert roster.add_person("Adam") is True
    assert roster.add_person("Zoe") is False
    assert roster.add_person("   ") is False

    assert roster.people() == ["Adam", "Zoe"]


def test_add_job_persists_settings(container, backend):
    container.roster_service.add_job("Site Z")
    container.write_queue.drain()

    assert "Site Z" in backend.load_settings()["jobs"]
