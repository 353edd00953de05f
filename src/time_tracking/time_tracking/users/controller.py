from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..auth.decorators import make_admin_required
from ..core.constants import ADMIN_COOKIE_NAME
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container)

    @app.route("/admin/login", methods=["GET", "POST"], endpoint="admin_login")
    def admin_login():
        if request.method == "POST":
            pin = request.form.get("pin", "")
            try:
                admin = container.auth_service.admin_login(pin)
            except DomainError as e:
                flash(str(e), "danger")
                return render_template("admin/login.html"), 401
            except Exception:
                logger.exception("Admin login failed")
                flash("System error while signing in", "danger")
                return render_template("admin/login.html"), 500

            response = redirect(url_for("admin_dashboard"))
            response.set_cookie(
                ADMIN_COOKIE_NAME,
                container.auth_session.issue(admin.user_id),
                httponly=True,
                samesite="Lax",
                path="/",
            )
            return response

        return render_template("admin/login.html")

    @app.route("/admin/logout", methods=["POST"], endpoint="admin_logout")
    @admin_required
    def admin_logout():
        response = redirect(url_for("admin_login"))
        response.delete_cookie(ADMIN_COOKIE_NAME, path="/")
        flash("Signed out.", "info")
        return response

    def _run(action, success_message: str):
        try:
            action()
            flash(success_message, "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Admin employee action failed")
            flash("System error while saving", "danger")
        return redirect(url_for("admin_dashboard"))

    @app.route("/admin/employees", methods=["POST"], endpoint="admin_create_employee")
    @admin_required
    def admin_create_employee():
        return _run(
            lambda: container.user_service.create_employee(
                current_role=g.admin.role,
                name=request.form.get("name", ""),
                pin_code=request.form.get("pin", ""),
                hourly_pay=request.form.get("hourly_pay"),
            ),
            "Employee added.",
        )

    @app.route("/admin/employees/<int:user_id>", methods=["POST"], endpoint="admin_update_employee")
    @admin_required
    def admin_update_employee(user_id: int):
        return _run(
            lambda: container.user_service.update_employee(
                current_role=g.admin.role,
                user_id=user_id,
                name=request.form.get("name", ""),
                hourly_pay=request.form.get("hourly_pay"),
            ),
            "Employee updated.",
        )

    @app.route("/admin/employees/<int:user_id>/toggle", methods=["POST"], endpoint="admin_toggle_employee")
    @admin_required
    def admin_toggle_employee(user_id: int):
        return _run(
            lambda: container.user_service.toggle_active(current_role=g.admin.role, user_id=user_id),
            "Employee status changed.",
        )

    @app.route("/admin/employees/<int:user_id>/pin", methods=["POST"], endpoint="admin_update_pin")
    @admin_required
    def admin_update_pin(user_id: int):
        return _run(
            lambda: container.user_service.update_pin(
                current_role=g.admin.role,
                user_id=user_id,
                new_pin=request.form.get("pin", ""),
            ),
            "PIN updated.",
        )

    @app.route("/admin/employees/<int:user_id>/delete", methods=["POST"], endpoint="admin_delete_employee")
    @admin_required
    def admin_delete_employee(user_id: int):
        return _run(
            lambda: container.user_service.delete_employee(current_role=g.admin.role, user_id=user_id),
            "Employee deleted.",
        )
