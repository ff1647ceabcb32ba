SECRET_KEY = "test-secret"
DEBUG = False
TESTING = True

TIMEZONE = "America/Toronto"
STORAGE_BACKEND = "memory"
DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "timesheet_test",
}

AUTO_INIT_DB = False

WRITE_MAX_RETRIES = 0
WRITE_BACKOFF_SECONDS = 0.0
POLL_INTERVAL_SECONDS = 5.0

STRICT_CLOCK_IN = False
DEFAULT_REPORT_DAYS = 14
LOG_LEVEL = "WARNING"
