import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timecard_db"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Seeds the default job-site catalog (INSERT IGNORE, safe to repeat)
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

# Labor-week boundary: "monday" (ISO) or "sunday".
WEEK_START = os.getenv("WEEK_START", "monday")
# IANA zone used to assign an event's calendar day.
WORKER_TIMEZONE = os.getenv("WORKER_TIMEZONE", "America/Los_Angeles")
RETENTION_DAYS = int(os.getenv("RETENTION_DAYS", "90"))
