from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Flask, Response, current_app, jsonify, request

from ..common.datetime_utils import current_date, default_report_range, format_date_short, minutes_to_hours_string
from ..container import Container
from ..core.exceptions import ValidationError
from ..reports import exporters
from ..reports.model import PersonReport
from .common import json_body, json_errors, optional_date


def _report_ui(r: PersonReport) -> dict:
    return {
        "person_name": r.person_name,
        "total_mins": r.total_mins,
        "total": minutes_to_hours_string(r.total_mins),
        "all_ids": list(r.all_ids),
        "daily_summaries": [
            {
                "date": d.date,
                "date_short": format_date_short(d.date),
                "duration_mins": d.duration_mins,
                "duration": minutes_to_hours_string(d.duration_mins),
                "job_names": list(d.job_names),
                "entry_ids": list(d.entry_ids),
            }
            for d in r.daily_summaries
        ],
    }


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _filters() -> tuple[Optional[str], Optional[date], Optional[date]]:
        default_start, default_end = default_report_range(
            current_date(), days=int(current_app.config.get("DEFAULT_REPORT_DAYS", 14))
        )
        start = optional_date(request.args.get("start"), "start") if "start" in request.args else default_start
        end = optional_date(request.args.get("end"), "end") if "end" in request.args else default_end
        return request.args.get("person") or None, start, end

    @app.route("/api/report", methods=["GET"], endpoint="api_report")
    @json_errors
    def report():
        person, start, end = _filters()
        data = reports.build(person=person, start=start, end=end)
        return jsonify(
            {
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
                "people": [_report_ui(r) for r in data],
            }
        )

    @app.route("/api/report/approve", methods=["POST"], endpoint="api_report_approve")
    @json_errors
    def approve():
        ids = json_body().get("ids")
        if not isinstance(ids, list):
            raise ValidationError("ids must be a list")
        removed = reports.approve(str(i) for i in ids)
        return jsonify({"success": True, "removed": removed})

    @app.route("/api/report/export.csv", methods=["GET"], endpoint="api_report_csv")
    @json_errors
    def export_csv():
        person, start, end = _filters()
        data = reports.build(person=person, start=start, end=end)
        return Response(
            exporters.csv_bytes(data),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={exporters.export_stem(start, end)}.csv"},
        )

    @app.route("/api/report/export.txt", methods=["GET"], endpoint="api_report_text")
    @json_errors
    def export_text():
        person, start, end = _filters()
        data = reports.build(person=person, start=start, end=end)
        return Response(exporters.text_table(data, start, end), mimetype="text/plain")

    @app.route("/api/report/export.json", methods=["GET"], endpoint="api_report_tables")
    @json_errors
    def export_tables():
        person, start, end = _filters()
        data = reports.build(person=person, start=start, end=end)
        return jsonify(
            {
                "filename": exporters.export_stem(start, end),
                "sheets": exporters.workbook(data),
                "tables": exporters.document_tables(data, start, end),
            }
        )
