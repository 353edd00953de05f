from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.time_tracking.time_tracking.database.bootstrap import apply_schema
from src.time_tracking.time_tracking.database.connection import DBConfig, DatabaseConnection


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2025, 1, 8, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def sqlite_conn(tmp_path) -> DatabaseConnection:
    conn = DatabaseConnection(DBConfig(engine="sqlite", path=str(tmp_path / "tt.db")))
    apply_schema(conn)
    return conn


@pytest.fixture
def app(tmp_path):
    from src.time_tracking.time_tracking.main import create_app

    app = create_app(
        {
            "SECRET_KEY": "test-secret",
            "DB_CONFIG": {"engine": "sqlite", "path": str(tmp_path / "app.db")},
            "TESTING": True,
            "DEFAULT_TIMEZONE": "UTC",
            "EXPORT_DIR": str(tmp_path / "exports"),
            "EXPORT_IN_BACKGROUND": False,
            "AUTO_INIT_DB": True,
            "AUTO_SEED_DB": True,
            "LOG_LEVEL": "WARNING",
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    res = client.post("/admin/login", data={"pin": "1234"})
    assert res.status_code == 302
    return client
