import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "timesheet-dev-secret"

    TIMEZONE = os.environ.get("TIMEZONE", "America/Toronto")
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "memory")

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "timesheet_db")

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))

    WRITE_MAX_RETRIES = int(os.environ.get("WRITE_MAX_RETRIES", "0"))
    WRITE_BACKOFF_SECONDS = float(os.environ.get("WRITE_BACKOFF_SECONDS", "1.0"))
    POLL_INTERVAL_SECONDS = float(os.environ.get("POLL_INTERVAL_SECONDS", "5.0"))

    STRICT_CLOCK_IN = bool(int(os.environ.get("STRICT_CLOCK_IN", "0")))
    DEFAULT_REPORT_DAYS = int(os.environ.get("DEFAULT_REPORT_DAYS", "14"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}
