"""Shape report data for export surfaces.

Only the data is produced here (rows, tables, text, CSV); rendering to
spreadsheet or PDF files happens outside this package.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import minutes_to_hours_string
from .model import PersonReport

SHEET_HEADERS = ("Date", "Job Sites", "Total Hours")
TEXT_RULE = "-----------|----------------------|-------"


def _range_label(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def export_stem(start: Optional[date], end: Optional[date]) -> str:
    return f"Timesheet_Daily_{_range_label(start)}_{_range_label(end)}"


def sheet_name(person_name: str) -> str:
    # Spreadsheet tab names are capped at 31 characters.
    return person_name[:31]


def sheet_rows(report: PersonReport) -> list[dict]:
    rows = [
        {
            "Date": d.date,
            "Job Sites": ", ".join(d.job_names),
            "Total Hours": minutes_to_hours_string(d.duration_mins),
        }
        for d in report.daily_summaries
    ]
    rows.append({"Date": "TOTAL", "Job Sites": "", "Total Hours": minutes_to_hours_string(report.total_mins)})
    return rows


def document_tables(reports: Sequence[PersonReport], start: Optional[date], end: Optional[date]) -> list[dict]:
    """One table per person, in report order (one page each)."""
    tables = []
    for r in reports:
        body = [[d.date, ", ".join(d.job_names), minutes_to_hours_string(d.duration_mins)] for d in r.daily_summaries]
        body.append(["GRAND TOTAL", "", minutes_to_hours_string(r.total_mins)])
        tables.append(
            {
                "title": "Daily Timesheet Report",
                "employee": f"Employee: {r.person_name}",
                "range": f"Range: {_range_label(start)} to {_range_label(end)}",
                "head": list(SHEET_HEADERS),
                "body": body,
            }
        )
    return tables


def text_table(reports: Sequence[PersonReport], start: Optional[date], end: Optional[date]) -> str:
    lines = [f"Daily Timesheet Report ({_range_label(start)} - {_range_label(end)})", ""]
    for r in reports:
        lines.append(f"Employee: {r.person_name}")
        lines.append("DATE       | JOB SITES            | TOTAL")
        lines.append(TEXT_RULE)
        for d in r.daily_summaries:
            jobs = ", ".join(d.job_names).ljust(20)[:20]
            lines.append(f"{d.date.ljust(10)} | {jobs} | {minutes_to_hours_string(d.duration_mins)}")
        lines.append(TEXT_RULE)
        lines.append(f"TOTAL: {minutes_to_hours_string(r.total_mins)}")
        lines.append("")
    return "\n".join(lines) + "\n"


def csv_bytes(reports: Sequence[PersonReport]) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(["Employee", *SHEET_HEADERS])
    for r in reports:
        for row in sheet_rows(r):
            writer.writerow([r.person_name, row["Date"], row["Job Sites"], row["Total Hours"]])
    return buf.getvalue().encode("utf-8")


def workbook(reports: Sequence[PersonReport]) -> dict[str, list[dict]]:
    """Sheet name -> rows, one sheet per person."""
    return {sheet_name(r.person_name): sheet_rows(r) for r in reports}
