from __future__ import annotations

import logging
from functools import wraps

from flask import g, redirect, render_template, request, url_for

from ..core.constants import ADMIN_COOKIE_NAME
from ..container import Container

logger = logging.getLogger(__name__)


def make_admin_required(container: Container):
    """Build the ``@admin_required`` decorator for admin views.

    The signed cookie is verified on every request and the user must still be
    an active ADMIN; otherwise the view redirects to the login page.
    """

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user_id = container.auth_session.verify(request.cookies.get(ADMIN_COOKIE_NAME))
            try:
                admin = container.auth_service.get_admin(user_id) if user_id is not None else None
            except Exception:
                logger.exception("Admin session check failed")
                return render_template("error.html", message="Unable to load. Check the database connection."), 500
            if admin is None:
                if user_id is not None:
                    logger.info("Rejected admin session for user %s", user_id)
                return redirect(url_for("admin_login"))

            g.admin = admin
            return view(*args, **kwargs)

        return wrapper

    return admin_required
