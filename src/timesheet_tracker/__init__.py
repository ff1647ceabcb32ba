"""Timesheet Tracker package.

Organized by feature modules (entries, sessions, reports, bulk, roster)
with a thin Flask controller layer on top of plain service objects. All
application state lives in one ``AppState`` owned by ``StateStore``;
persistence is an injected backend.
"""
