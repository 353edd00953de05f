from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..auth.decorators import make_admin_required
from ..core.constants import WEEKDAY_NAMES
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container)

    @app.route("/admin/settings", endpoint="admin_settings")
    @admin_required
    def admin_settings():
        try:
            grid = container.schedule_service.get_grid(current_role=g.admin.role)
            week_start_day = container.settings_service.get_week_start_day()
            timezone = container.settings_service.get_timezone()
            email_settings = container.settings_service.get_email_report()
        except Exception:
            logger.exception("Settings page data load failed")
            return render_template("error.html", message="Unable to load. Check the database connection."), 500

        return render_template(
            "admin/settings.html",
            admin=g.admin,
            grid=grid,
            weekday_names=WEEKDAY_NAMES,
            week_start_day=week_start_day,
            timezone=timezone or "",
            email_settings=email_settings,
        )

    def _save(action, success_message: str):
        try:
            action()
            flash(success_message, "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Saving settings failed")
            flash("System error while saving settings", "danger")
        return redirect(url_for("admin_settings"))

    @app.route("/admin/settings/week-start", methods=["POST"], endpoint="admin_set_week_start")
    @admin_required
    def admin_set_week_start():
        return _save(
            lambda: container.settings_service.set_week_start_day(
                current_role=g.admin.role, day=request.form.get("week_start_day")
            ),
            "Week start day saved.",
        )

    @app.route("/admin/settings/timezone", methods=["POST"], endpoint="admin_set_timezone")
    @admin_required
    def admin_set_timezone():
        return _save(
            lambda: container.settings_service.set_timezone(
                current_role=g.admin.role, tz_name=request.form.get("timezone")
            ),
            "Timezone saved.",
        )

    @app.route("/admin/settings/email-report", methods=["POST"], endpoint="admin_set_email_report")
    @admin_required
    def admin_set_email_report():
        return _save(
            lambda: container.settings_service.set_email_report(
                current_role=g.admin.role,
                recipient=request.form.get("recipient"),
                body=request.form.get("body"),
            ),
            "Email report settings saved.",
        )
