"""Backup entries and settings to a JSON file.

Reads through the configured storage backend, so it works the same for
MySQL and any other backend the settings select.
"""

from __future__ import annotations

import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from timesheet_tracker.container import build_backend
from timesheet_tracker.core.exceptions import PersistenceError


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    backend = build_backend(settings.STORAGE_BACKEND, db_config=settings.DB_CONFIG)

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"timesheet_{ts}.json"

    try:
        payload = {
            "entries": list(backend.load_entries()),
            "settings": backend.load_settings() or {},
        }
    except PersistenceError as e:
        raise SystemExit(f"Backup failed: {e}")
    finally:
        backend.close()

    out_file.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"OK: Backup created: {out_file} ({len(payload['entries'])} entries)")


if __name__ == "__main__":
    main()
