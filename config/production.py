import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "engine": os.getenv("DB_ENGINE", "mysql"),
    "path": os.getenv("DB_PATH", "/var/lib/time-tracking/timetracking.db"),
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "timetracking"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timetracking"),
}

DEBUG = False

DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "")

EXPORT_DIR = os.getenv("EXPORT_DIR", "exports")
EXPORT_IN_BACKGROUND = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
