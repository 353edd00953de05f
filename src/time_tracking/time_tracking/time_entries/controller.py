from __future__ import annotations

import csv
import io
import logging
from typing import Optional

from flask import Flask, flash, g, jsonify, redirect, render_template, request, url_for

from ..auth.decorators import make_admin_required
from ..common.datetime_utils import format_local, now_utc, parse_datetime_input
from ..core.exceptions import DomainError, ValidationError
from ..core.results import ActionResult
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container)

    def _payload() -> dict:
        return request.get_json(silent=True) or request.form.to_dict()

    def _optional_user_id(payload: dict) -> Optional[int]:
        raw = payload.get("user_id")
        if raw in (None, ""):
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValidationError("Invalid employee")

    def _respond(result: ActionResult, status: int = 200):
        return jsonify(result.to_dict()), status

    def _run_clock_action(action: str):
        payload = _payload()
        try:
            pin = str(payload.get("pin", ""))
            user_id = _optional_user_id(payload)
            if action == "in":
                entry = container.clock_service.clock_in(pin, user_id)
            else:
                entry = container.clock_service.clock_out(pin, user_id)
            return _respond(
                ActionResult.ok(
                    entry={
                        "id": entry.entry_id,
                        "clock_in_time": entry.clock_in_time.isoformat(),
                        "clock_out_time": entry.clock_out_time.isoformat() if entry.clock_out_time else None,
                        "total_hours": entry.total_hours,
                    }
                )
            )
        except DomainError as e:
            logger.info("Clock %s rejected: %s", action, e)
            return _respond(ActionResult.fail(str(e)), 400)
        except Exception:
            logger.exception("Clock %s failed", action)
            return _respond(ActionResult.fail("System error while recording your shift"), 500)

    @app.route("/", endpoint="clock_page")
    def clock_page():
        try:
            employees = container.user_service.list_active_employees()
            active_now = container.shift_service.list_active_now()
        except Exception:
            logger.exception("Clock page data load failed")
            return render_template("error.html", message="Unable to load. Check the database connection."), 500

        return render_template("clock.html", employees=employees, active_now=active_now)

    @app.route("/api/clock/status", methods=["POST"], endpoint="api_clock_status")
    def api_clock_status():
        payload = _payload()
        try:
            status = container.clock_service.status(str(payload.get("pin", "")), _optional_user_id(payload))
        except DomainError as e:
            return _respond(ActionResult.fail(str(e)), 400)
        except Exception:
            logger.exception("Clock status failed")
            return _respond(ActionResult.fail("System error while loading status"), 500)

        entry = status.active_entry
        return _respond(
            ActionResult.ok(
                user={"id": status.user.user_id, "name": status.user.name, "role": status.user.role.value},
                active_entry=(
                    {"id": entry.entry_id, "clock_in_time": entry.clock_in_time.isoformat()} if entry else None
                ),
            )
        )

    @app.route("/api/clock/in", methods=["POST"], endpoint="api_clock_in")
    def api_clock_in():
        return _run_clock_action("in")

    @app.route("/api/clock/out", methods=["POST"], endpoint="api_clock_out")
    def api_clock_out():
        return _run_clock_action("out")

    @app.route("/admin/entries/<int:entry_id>/edit", methods=["POST"], endpoint="admin_edit_entry")
    @admin_required
    def admin_edit_entry(entry_id: int):
        tz_name = container.settings_service.get_display_timezone()
        try:
            new_clock_in = parse_datetime_input(request.form.get("clock_in", ""), tz_name)
            raw_out = (request.form.get("clock_out") or "").strip()
            new_clock_out = parse_datetime_input(raw_out, tz_name) if raw_out else None

            container.shift_service.edit_entry(
                current_role=g.admin.role,
                entry_id=entry_id,
                editor_id=g.admin.user_id,
                new_clock_in=new_clock_in,
                new_clock_out=new_clock_out,
            )
            flash("Time entry updated.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Editing entry %s failed", entry_id)
            flash("System error while updating the entry", "danger")

        return redirect(url_for("admin_dashboard"))

    @app.route("/admin/entries.csv", endpoint="admin_entries_csv")
    @admin_required
    def admin_entries_csv():
        tz_name = container.settings_service.get_display_timezone()
        rows = container.shift_service.list_recent()

        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=[
                "entry_id",
                "user_id",
                "user_name",
                "clock_in_utc",
                "clock_out_utc",
                "clock_in_local",
                "clock_out_local",
                "total_hours",
                "is_edited",
            ],
        )
        writer.writeheader()
        for row in rows:
            e = row.entry
            writer.writerow(
                {
                    "entry_id": e.entry_id,
                    "user_id": e.user_id,
                    "user_name": row.user_name,
                    "clock_in_utc": e.clock_in_time.isoformat(),
                    "clock_out_utc": e.clock_out_time.isoformat() if e.clock_out_time else "",
                    "clock_in_local": format_local(e.clock_in_time, tz_name),
                    "clock_out_local": format_local(e.clock_out_time, tz_name) if e.clock_out_time else "",
                    "total_hours": "" if e.total_hours is None else f"{e.total_hours:.2f}",
                    "is_edited": int(e.is_edited),
                }
            )

        filename = f"time_entries_{now_utc().strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
