from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .api.dashboard_controller import register as register_dashboard
from .api.entries_controller import register as register_entries
from .api.reports_controller import register as register_reports
from .container import build_backend, build_container
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, list_tables
from .persistence.backend import PersistenceBackend

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, backend: Optional[PersistenceBackend] = None, start_workers: bool = True) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["DEFAULT_REPORT_DAYS"] = int(getattr(settings, "DEFAULT_REPORT_DAYS", 14))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    storage = str(getattr(settings, "STORAGE_BACKEND", StorageBackend.MEMORY.value))
    db_config = getattr(settings, "DB_CONFIG", None)
    logger.info("settings=%s storage=%s", settings_module, storage)

    if backend is None:
        if storage == StorageBackend.MYSQL.value and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        backend = build_backend(
            storage,
            db_config=db_config,
            poll_interval=float(getattr(settings, "POLL_INTERVAL_SECONDS", 5.0)),
        )

    container = build_container(
        backend=backend,
        timezone=str(getattr(settings, "TIMEZONE", "America/Toronto")),
        write_max_retries=int(getattr(settings, "WRITE_MAX_RETRIES", 0)),
        write_backoff_seconds=float(getattr(settings, "WRITE_BACKOFF_SECONDS", 1.0)),
        strict_clock_in=bool(getattr(settings, "STRICT_CLOCK_IN", False)),
        start_workers=start_workers,
    )
    app.extensions["timesheet"] = container

    register_dashboard(app, container)
    register_entries(app, container)
    register_reports(app, container)

    return app
