from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.time_tracking.time_tracking.database.bootstrap import apply_schema, ensure_demo_users
from src.time_tracking.time_tracking.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(dict(settings.DB_CONFIG)))

    apply_schema(conn)
    ensure_demo_users(conn)

    print(f"OK: Seeded demo users (Admin PIN 1234, Jane Employee PIN 5678) -> {conn.config.describe()}")


if __name__ == "__main__":
    main()
