"""Backup database.

SQLite: writes the same SQL snapshot the app keeps under EXPORT_DIR, plus a
timestamped copy in backups/. MySQL: uses `mysqldump` (must be installed).
"""

from __future__ import annotations

import importlib
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.time_tracking.time_tracking.database.connection import DBConfig, DatabaseConnection
from src.time_tracking.time_tracking.database.export import SnapshotExporter


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db = DBConfig.from_dict(dict(settings.DB_CONFIG))

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{db.database}_{ts}.sql"

    conn = DatabaseConnection(db)
    if conn.is_embedded:
        exporter = SnapshotExporter(conn, getattr(settings, "EXPORT_DIR", "exports"), background=False)
        snapshot = exporter.export_now()
        shutil.copyfile(snapshot, out_file)
        print(f"OK: Backup created: {out_file}")
        return

    cmd = [
        "mysqldump",
        f"-h{db.host}",
        f"-P{db.port}",
        f"-u{db.user}",
        f"-p{db.password}",
        db.database,
    ]

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
        print(f"OK: Backup created: {out_file}")
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools.")


if __name__ == "__main__":
    main()
