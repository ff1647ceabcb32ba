import os

from .config import DB_CONFIG, Config

SECRET_KEY = Config.SECRET_KEY
DEBUG = True

TIMEZONE = Config.TIMEZONE
STORAGE_BACKEND = Config.STORAGE_BACKEND
DB_CONFIG = dict(DB_CONFIG)

# If enabled, the MySQL schema is applied on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

WRITE_MAX_RETRIES = Config.WRITE_MAX_RETRIES
WRITE_BACKOFF_SECONDS = Config.WRITE_BACKOFF_SECONDS
POLL_INTERVAL_SECONDS = Config.POLL_INTERVAL_SECONDS

STRICT_CLOCK_IN = Config.STRICT_CLOCK_IN
DEFAULT_REPORT_DAYS = Config.DEFAULT_REPORT_DAYS
LOG_LEVEL = "DEBUG"
