import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# engine: "sqlite" (embedded file, default) or "mysql"
DB_CONFIG = {
    "engine": os.getenv("DB_ENGINE", "sqlite"),
    "path": os.getenv("DB_PATH", "instance/timetracking.db"),
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timetracking"),
}

DEBUG = True

# IANA name used until an admin stores one; empty means server local time
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "")

# SQL snapshot of the embedded store, rewritten after every change
EXPORT_DIR = os.getenv("EXPORT_DIR", "exports")
EXPORT_IN_BACKGROUND = True

# If enabled, app will apply the schema on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Demo users: Admin (PIN 1234), Jane Employee (PIN 5678)
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
