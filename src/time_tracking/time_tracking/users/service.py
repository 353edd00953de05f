from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import parse_optional_amount, require_non_empty, validate_pin
from ..core.enums import Role
from ..core.exceptions import InvalidCredential, NotAuthorized, NotFound, UserDisabled, ValidationError
from ..database.export import SnapshotExporter
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def require_admin(current_role: Optional[Role]) -> None:
    if current_role != Role.ADMIN:
        raise NotAuthorized("You do not have permission")


class AuthService:
    """Use case: resolve who is behind a PIN (clock pad and admin login).

    PINs are not unique. The PIN-only flow takes the first match by user id,
    whether or not that user is active; the selector flow checks the PIN
    against the chosen user.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def resolve_pin(self, pin_code: str) -> User:
        user = self._users.find_first_by_pin((pin_code or "").strip())
        if not user:
            raise InvalidCredential()
        if not user.is_active:
            raise UserDisabled()
        return user

    def resolve_pin_for_user(self, user_id: int, pin_code: str) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise InvalidCredential("User not found")
        if not user.is_active:
            raise UserDisabled()
        if user.pin_code != (pin_code or "").strip():
            raise InvalidCredential()
        return user

    def admin_login(self, pin_code: str) -> User:
        user = self._users.find_first_by_pin((pin_code or "").strip(), role=Role.ADMIN, active_only=True)
        if not user:
            raise InvalidCredential("Invalid admin PIN")
        logger.info("Admin %s signed in", user.user_id)
        return user

    def get_admin(self, user_id: int) -> Optional[User]:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active or not user.is_admin:
            return None
        return user


class UserService:
    """Use case: manage employees (admin)."""

    def __init__(self, users: UserRepository, *, exporter: Optional[SnapshotExporter] = None):
        self._users = users
        self._exporter = exporter

    def _changed(self) -> None:
        if self._exporter is not None:
            self._exporter.schedule()

    def _get_employee(self, user_id: int, *, action: str) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFound()
        if user.is_admin:
            raise ValidationError(f"Cannot {action} admin user")
        return user

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def list_active_employees(self) -> Sequence[User]:
        return self._users.list_active_employees()

    def create_employee(
        self,
        *,
        current_role: Role,
        name: str,
        pin_code: str,
        hourly_pay=None,
    ) -> int:
        require_admin(current_role)
        name = require_non_empty(name, "Name")
        pin_code = validate_pin(pin_code)
        pay = parse_optional_amount(hourly_pay, "Hourly pay")

        user_id = self._users.create_user(name=name, role=Role.EMPLOYEE, pin_code=pin_code, hourly_pay=pay)
        logger.info("Created employee %s (%s)", user_id, name)
        self._changed()
        return user_id

    def update_employee(self, *, current_role: Role, user_id: int, name: str, hourly_pay=None) -> None:
        require_admin(current_role)
        name = require_non_empty(name, "Name")
        pay = parse_optional_amount(hourly_pay, "Hourly pay")

        if not self._users.get_by_id(int(user_id)):
            raise NotFound()

        self._users.update_user(int(user_id), name=name, hourly_pay=pay)
        logger.info("Updated employee %s", user_id)
        self._changed()

    def toggle_active(self, *, current_role: Role, user_id: int) -> bool:
        """Flip is_active; returns the new value."""
        require_admin(current_role)
        user = self._get_employee(user_id, action="disable")

        new_state = not user.is_active
        self._users.set_active(user.user_id, is_active=new_state)
        logger.info("Employee %s is now %s", user.user_id, "active" if new_state else "disabled")
        self._changed()
        return new_state

    def update_pin(self, *, current_role: Role, user_id: int, new_pin: str) -> None:
        require_admin(current_role)
        pin_code = validate_pin(new_pin)
        user = self._get_employee(user_id, action="change PIN of")

        self._users.set_pin(user.user_id, pin_code=pin_code)
        logger.info("PIN changed for employee %s", user.user_id)
        self._changed()

    def delete_employee(self, *, current_role: Role, user_id: int) -> None:
        """Hard delete; entries, their audit rows and schedules cascade."""
        require_admin(current_role)
        user = self._get_employee(user_id, action="delete")

        if not self._users.delete_by_id(user.user_id):
            raise NotFound()
        logger.info("Deleted employee %s (%s)", user.user_id, user.name)
        self._changed()
