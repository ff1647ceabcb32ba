"""Example: drive the service layer directly (no Flask).

Controllers are thin; the timesheet rules live in the services.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from timesheet_tracker.container import build_container
from timesheet_tracker.persistence.memory_backend import InMemoryBackend
from timesheet_tracker.reports.exporters import text_table


def main():
    container = build_container(backend=InMemoryBackend(), start_workers=False)

    preview = container.bulk_import_service.preview(
        "John | 2026-02-01 | 08:00-17:00 | lunch\n"
        "Maria | 2026-02-01 | 07:00-15:30\n"
        "BadLine"
    )
    for r in preview.results:
        if r.error:
            print(f"skip: {r.error}")
    container.bulk_import_service.confirm(preview.results)

    reports = container.report_service.build()
    print(text_table(reports, None, None))
    container.shutdown()


if __name__ == "__main__":
    main()
