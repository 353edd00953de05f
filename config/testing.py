import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "engine": "sqlite",
    "path": os.getenv("DB_PATH", "instance/timetracking-test.db"),
}

DEBUG = False
TESTING = True

DEFAULT_TIMEZONE = "UTC"

EXPORT_DIR = os.getenv("EXPORT_DIR", "instance/test-exports")
EXPORT_IN_BACKGROUND = False

AUTO_INIT_DB = True
AUTO_SEED_DB = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
