from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.datetime_utils import current_time_of_day, iso_date, now_local, to_12_hour
from ..container import Container
from .common import json_body, json_errors


def register(app: Flask, container: Container) -> None:
    sessions = container.session_service
    roster = container.roster_service

    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @json_errors
    def dashboard():
        # Polled about once a second by the client; read-only.
        now = now_local()
        rows = sessions.dashboard(now=now)
        return jsonify(
            {
                "date": iso_date(now),
                "time": to_12_hour(current_time_of_day(now)),
                "workers": [asdict(r) for r in rows],
                "jobs": roster.jobs(),
            }
        )

    @app.route("/api/clock-in", methods=["POST"], endpoint="api_clock_in")
    @json_errors
    def clock_in():
        data = json_body()
        session = sessions.clock_in(data.get("person", ""), data.get("job", ""))
        return jsonify({"success": True, "session": session.to_dict()})

    @app.route("/api/clock-out", methods=["POST"], endpoint="api_clock_out")
    @json_errors
    def clock_out():
        data = json_body()
        entry = sessions.clock_out(data.get("person", ""))
        if entry is None:
            return jsonify({"success": True, "entry": None})
        return jsonify({"success": True, "entry": entry.to_dict()})

    @app.route("/api/people", methods=["GET"], endpoint="api_people")
    def list_people():
        return jsonify(roster.people())

    @app.route("/api/people", methods=["POST"], endpoint="api_add_person")
    @json_errors
    def add_person():
        added = roster.add_person(json_body().get("name", ""))
        return jsonify({"success": True, "added": added, "people": roster.people()})

    @app.route("/api/jobs", methods=["GET"], endpoint="api_jobs")
    def list_jobs():
        return jsonify(roster.jobs())

    @app.route("/api/jobs", methods=["POST"], endpoint="api_add_job")
    @json_errors
    def add_job():
        added = roster.add_job(json_body().get("name", ""))
        return jsonify({"success": True, "added": added, "jobs": roster.jobs()})

    @app.route("/api/sync", methods=["GET"], endpoint="api_sync")
    def sync_status():
        return jsonify(container.write_queue.snapshot())

    @app.route("/api/sync/reset", methods=["POST"], endpoint="api_sync_reset")
    def sync_reset():
        container.write_queue.reset_failures()
        return jsonify(container.write_queue.snapshot())
