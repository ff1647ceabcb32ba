from __future__ import annotations

from dataclasses import replace

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date_label, minutes_to_hours_string, to_12_hour
from ..container import Container
from ..core.constants import MANUAL_ENTRY_JOB
from ..entries.model import TimeEntry
from .common import json_body, json_errors


def _entry_ui(e: TimeEntry) -> dict:
    return {
        **e.to_dict(),
        "date_label": format_date_label(e.date),
        "clock_in_12h": to_12_hour(e.clock_in),
        "clock_out_12h": to_12_hour(e.clock_out),
        "duration": minutes_to_hours_string(e.duration_mins),
    }


def _entry_from_body(data: dict, *, entry_id: str = "") -> TimeEntry:
    entry = TimeEntry.from_dict({**data, "id": entry_id or data.get("id") or ""})
    if not entry.job_name:
        entry = replace(entry, job_name=MANUAL_ENTRY_JOB)
    return entry


def register(app: Flask, container: Container) -> None:
    entries = container.entry_service
    bulk = container.bulk_import_service

    @app.route("/api/entries", methods=["GET"], endpoint="api_entries")
    @json_errors
    def list_entries():
        found = entries.search(request.args.get("q", ""), request.args.get("person") or None)
        return jsonify([_entry_ui(e) for e in found])

    @app.route("/api/entries", methods=["POST"], endpoint="api_create_entry")
    @json_errors
    def create_entry():
        saved = entries.save(_entry_from_body(json_body()))
        return jsonify({"success": True, "entry": _entry_ui(saved)}), 201

    @app.route("/api/entries/<entry_id>", methods=["PUT"], endpoint="api_update_entry")
    @json_errors
    def update_entry(entry_id: str):
        entry = _entry_from_body(json_body(), entry_id=entry_id)
        existing = entries.get(entry_id)
        if existing and not entry.created_at:
            entry = replace(entry, created_at=existing.created_at)
        saved = entries.save(entry)
        return jsonify({"success": True, "entry": _entry_ui(saved)})

    @app.route("/api/entries/<entry_id>", methods=["DELETE"], endpoint="api_delete_entry")
    @json_errors
    def delete_entry(entry_id: str):
        return jsonify({"success": True, "removed": entries.remove(entry_id)})

    def _preview_payload(preview) -> dict:
        return {
            "valid": preview.valid_count,
            "invalid": preview.error_count,
            "lines": [
                {
                    "line": r.line,
                    "error": r.error,
                    "entry": _entry_ui(r.entry) if r.entry else None,
                }
                for r in preview.results
            ],
        }

    @app.route("/api/bulk/parse", methods=["POST"], endpoint="api_bulk_parse")
    @json_errors
    def bulk_parse():
        preview = bulk.preview(json_body().get("text", ""))
        return jsonify(_preview_payload(preview))

    @app.route("/api/bulk/import", methods=["POST"], endpoint="api_bulk_import")
    @json_errors
    def bulk_import():
        # The preview is never stored server-side; the paste is parsed again.
        preview = bulk.preview(json_body().get("text", ""))
        imported = bulk.confirm(preview.results)
        return jsonify({"success": True, "imported": imported, **_preview_payload(preview)})
