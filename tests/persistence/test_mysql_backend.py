from __future__ import annotations

import json

import mysql.connector
import pytest

from timesheet_tracker.core.exceptions import PersistenceError
from timesheet_tracker.database.bootstrap import SCHEMA_SQL, _iter_sql_statements, _strip_create_db_and_use
from timesheet_tracker.persistence.mysql_backend import MySQLBackend


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self._result = []

    def execute(self, sql, params=None):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.error:
            raise self._conn.error
        self._result = list(self._conn.responses.pop(0)) if self._conn.responses else []

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return self._result

    def close(self):
        pass


class FakeConnection:
    def __init__(self, responses=(), error=None):
        self.responses = list(responses)
        self.error = error
        self.executed = []
        self.committed = 0
        self.rolled_back = 0

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def close(self):
        pass


class FakeFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self, *, with_database=True):
        return self.conn


def test_load_entries_maps_columns():
    conn = FakeConnection(
        responses=[
            [
                {
                    "id": "e1",
                    "person_name": "Al",
                    "job_name": None,
                    "entry_date": "2026-02-01",
                    "clock_in": "08:00",
                    "clock_out": "09:00",
                    "lunch_30_min": 1,
                    "notes": None,
                    "created_at": 7,
                    "duration_mins": 30.0,
                }
            ]
        ]
    )
    [row] = MySQLBackend(FakeFactory(conn)).load_entries()

    assert row["date"] == "2026-02-01"
    assert row["lunch_30_min"] is True
    assert row["job_name"] == ""
    assert row["notes"] == ""


def test_upsert_sends_all_columns_and_commits():
    conn = FakeConnection()
    MySQLBackend(FakeFactory(conn)).upsert_entry(
        {"id": "e1", "person_name": "Al", "date": "2026-02-01", "clock_in": "08:00", "clock_out": "09:00", "lunch_30_min": True, "created_at": 5, "duration_mins": 30}
    )

    sql, params = conn.executed[0]
    assert sql.startswith("INSERT INTO time_entries")
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert params[0] == "e1"
    assert params[6] == 1
    assert conn.committed == 1


def test_save_settings_merges_with_stored_document():
    conn = FakeConnection(responses=[[{"document": json.dumps({"people": ["A"], "jobs": ["J"]})}]])
    MySQLBackend(FakeFactory(conn)).save_settings({"people": ["A", "B"], "updatedAt": 42})

    sql, params = conn.executed[1]
    assert sql.startswith("INSERT INTO app_settings")
    assert json.loads(params[1]) == {"people": ["A", "B"], "jobs": ["J"], "updatedAt": 42}
    assert params[2] == 42


def test_driver_errors_become_persistence_errors():
    conn = FakeConnection(error=mysql.connector.Error("gone away"))

    with pytest.raises(PersistenceError, match="Delete entry failed"):
        MySQLBackend(FakeFactory(conn)).delete_entry("e1")
    assert conn.rolled_back == 1


def test_invalid_settings_json_is_persistence_error():
    conn = FakeConnection(responses=[[{"document": "{not json"}]])
    with pytest.raises(PersistenceError):
        MySQLBackend(FakeFactory(conn)).load_settings()


def test_schema_splits_into_create_statements():
    stmts = list(_iter_sql_statements(_strip_create_db_and_use("CREATE DATABASE x;\nUSE x;\n" + SCHEMA_SQL)))
    assert len(stmts) == 2
    assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in stmts)


def test_splitter_keeps_semicolons_inside_quotes():
    stmts = list(_iter_sql_statements("INSERT INTO t VALUES ('a;b'); SELECT 1"))
    assert stmts == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


def test_poller_keeps_running_after_listener_failure(caplog):
    backend = MySQLBackend(FakeFactory(FakeConnection()), poll_interval=0)
    marks = iter([((1, 1), 1), ((2, 2), 1)])
    backend.fingerprint = lambda: next(marks)
    backend.load_entries = lambda: []
    backend.load_settings = lambda: {}
    calls = []

    def on_entries(rows):
        calls.append(rows)
        if len(calls) == 1:
            raise RuntimeError("listener exploded")
        backend._stop.set()

    backend._poll(on_entries, lambda doc: True)

    assert len(calls) == 2
    assert "Applying polled changes failed" in caplog.text
