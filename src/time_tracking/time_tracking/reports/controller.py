from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, url_for

from ..auth.decorators import make_admin_required
from ..container import Container
from .email import build_mailto, week_label

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container)

    @app.route("/admin", endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        try:
            users = container.user_service.list_users()
            entries = container.shift_service.list_recent()
            audits = container.shift_service.list_audits()
            report = container.report_service.build_weekly_report()
            email_settings = container.settings_service.get_email_report()
        except Exception:
            logger.exception("Admin dashboard data load failed")
            return render_template("error.html", message="Unable to load. Check the database connection."), 500

        return render_template(
            "admin/dashboard.html",
            admin=g.admin,
            users=users,
            entries=entries,
            audits=audits,
            report=report,
            week_label=week_label(report),
            mailto=build_mailto(report, email_settings),
            tz_name=report.timezone,
            export_enabled=container.exporter.enabled,
        )

    @app.route("/admin/export", methods=["POST"], endpoint="admin_export")
    @admin_required
    def admin_export():
        if not container.exporter.enabled:
            flash("Snapshot export is only available for the embedded database.", "warning")
            return redirect(url_for("admin_dashboard"))
        try:
            path = container.exporter.export_now()
            flash(f"Database exported to {path}", "success")
        except Exception:
            logger.exception("Manual snapshot export failed")
            flash("Export failed", "danger")
        return redirect(url_for("admin_dashboard"))
