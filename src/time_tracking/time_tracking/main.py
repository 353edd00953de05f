from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.datetime_utils import format_local
from .container import build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .settings.controller import register as register_settings
from .time_entries.controller import register as register_time_entries
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

_SETTING_NAMES = (
    "SECRET_KEY",
    "DB_CONFIG",
    "DEBUG",
    "TESTING",
    "DEFAULT_TIMEZONE",
    "EXPORT_DIR",
    "EXPORT_IN_BACKGROUND",
    "AUTO_INIT_DB",
    "AUTO_SEED_DB",
    "LOG_LEVEL",
)


def _load_settings(overrides: Optional[Mapping[str, Any]]) -> dict:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {name: getattr(module, name, None) for name in _SETTING_NAMES}
    settings["SETTINGS_MODULE"] = settings_module
    settings.update(overrides or {})
    return settings


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    settings = _load_settings(overrides)

    logging.basicConfig(
        level=str(settings.get("LOG_LEVEL") or "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG"))
    app.config["TESTING"] = bool(settings.get("TESTING"))

    container = build_container(
        db_config=dict(settings["DB_CONFIG"]),
        secret_key=settings["SECRET_KEY"],
        export_dir=settings.get("EXPORT_DIR") or "exports",
        export_in_background=bool(settings.get("EXPORT_IN_BACKGROUND", True)),
        default_timezone=settings.get("DEFAULT_TIMEZONE") or None,
    )
    app.extensions["time_tracking"] = container

    logger.info("settings=%s db=%s", settings["SETTINGS_MODULE"], container.conn.config.describe())

    if settings.get("AUTO_INIT_DB"):
        apply_schema(container.conn)
        logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
    if settings.get("AUTO_SEED_DB"):
        ensure_demo_users(container.conn)

    @app.template_filter("local_time")
    def local_time(value, fmt: str = "%Y-%m-%d %H:%M"):
        return format_local(value, container.settings_service.get_display_timezone(), fmt)

    register_time_entries(app, container)
    register_users(app, container)
    register_reports(app, container)
    register_settings(app, container)
    register_schedules(app, container)

    return app
