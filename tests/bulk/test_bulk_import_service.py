from __future__ import annotations


def test_preview_counts_then_confirm_appends_only_valid(container):
    bulk = container.bulk_import_service
    preview = bulk.preview("John | 2026-02-01 | 08:00-17:00 | lunch\nBadLine\nAnn | 2026-02-01 | 10:00-09:00")

    assert preview.valid_count == 1
    assert preview.error_count == 2
    assert container.entry_service.list_entries() == []

    assert bulk.confirm(preview.results) == 1
    [entry] = container.entry_service.list_entries()
    assert entry.person_name == "John"


def test_confirm_with_nothing_valid_is_noop(container):
    bulk = container.bulk_import_service
    assert bulk.confirm(bulk.preview("BadLine").results) == 0
    assert container.write_queue.has_pending is False
