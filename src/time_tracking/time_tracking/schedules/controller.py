from __future__ import annotations

import logging
import re

from flask import Flask, flash, g, redirect, request, url_for

from ..auth.decorators import make_admin_required
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)

# Grid inputs are named hours-<user_id>-<day_of_week>.
_FIELD = re.compile(r"^hours-(\d+)-(\d)$")


def parse_grid_form(form) -> list[dict]:
    updates = []
    for key, value in form.items():
        m = _FIELD.match(key)
        if not m:
            continue
        updates.append({"user_id": int(m.group(1)), "day_of_week": int(m.group(2)), "hours": value})
    return updates


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container)

    @app.route("/admin/settings/schedules", methods=["POST"], endpoint="admin_save_schedules")
    @admin_required
    def admin_save_schedules():
        try:
            written = container.schedule_service.set_grid(
                current_role=g.admin.role, updates=parse_grid_form(request.form)
            )
            flash(f"Schedule saved ({written} cells).", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Saving schedule grid failed")
            flash("System error while saving the schedule", "danger")
        return redirect(url_for("admin_settings"))
