import os

from .config import DB_CONFIG, Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DEBUG = False

TIMEZONE = Config.TIMEZONE
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
DB_CONFIG = dict(DB_CONFIG)

AUTO_INIT_DB = Config.AUTO_INIT_DB

# Production retries failed writes instead of dropping them on first failure.
WRITE_MAX_RETRIES = int(os.getenv("WRITE_MAX_RETRIES", "3"))
WRITE_BACKOFF_SECONDS = Config.WRITE_BACKOFF_SECONDS
POLL_INTERVAL_SECONDS = Config.POLL_INTERVAL_SECONDS

STRICT_CLOCK_IN = Config.STRICT_CLOCK_IN
DEFAULT_REPORT_DAYS = Config.DEFAULT_REPORT_DAYS
LOG_LEVEL = Config.LOG_LEVEL
