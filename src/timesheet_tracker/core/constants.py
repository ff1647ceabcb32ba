"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

OPERATING_TIMEZONE = "America/Toronto"

DEFAULT_JOBS = ("General Construction", "Maintenance", "Site Survey")

LUNCH_DEDUCTION_MINUTES = 30
DEFAULT_REPORT_DAYS = 14

MANUAL_ENTRY_JOB = "Manual Entry"
BULK_IMPORT_JOB = "Bulk Import"
ALL_PEOPLE = "All"

WRITE_MAX_RETRIES = 0
WRITE_BACKOFF_SECONDS = 1.0
POLL_INTERVAL_SECONDS = 5.0
