from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest

from src.time_tracking.time_tracking.core.enums import Role
from src.time_tracking.time_tracking.core.exceptions import InvalidCredential, UserDisabled
from src.time_tracking.time_tracking.users.model import User
from src.time_tracking.time_tracking.users.service import AuthService


@dataclass
class InMemoryUsers:
    users_by_id: dict[int, User]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def find_first_by_pin(self, pin_code: str, *, role=None, active_only: bool = False) -> Optional[User]:
        for user_id in sorted(self.users_by_id):
            u = self.users_by_id[user_id]
            if u.pin_code != pin_code:
                continue
            if role is not None and u.role != role:
                continue
            if active_only and not u.is_active:
                continue
            return u
        return None


def _users(*users: User) -> InMemoryUsers:
    return InMemoryUsers({u.user_id: u for u in users})


def test_resolve_pin_returns_matching_user():
    jane = User(user_id=2, name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    auth = AuthService(_users(jane))

    assert auth.resolve_pin("5678") == jane


def test_resolve_pin_unknown_raises():
    auth = AuthService(_users(User(user_id=2, name="Jane", role=Role.EMPLOYEE, pin_code="5678")))

    with pytest.raises(InvalidCredential) as exc:
        auth.resolve_pin("0000")
    assert str(exc.value) == "Invalid PIN"


def test_disabled_user_is_rejected_even_with_correct_pin():
    bob = User(user_id=3, name="Bob", role=Role.EMPLOYEE, pin_code="4444", is_active=False)
    auth = AuthService(_users(bob))

    with pytest.raises(UserDisabled):
        auth.resolve_pin("4444")
    with pytest.raises(UserDisabled):
        auth.resolve_pin_for_user(3, "4444")


def test_shared_pin_resolves_to_lowest_user_id():
    a = User(user_id=5, name="Amy", role=Role.EMPLOYEE, pin_code="1111")
    b = User(user_id=9, name="Ben", role=Role.EMPLOYEE, pin_code="1111")
    auth = AuthService(_users(b, a))

    assert auth.resolve_pin("1111").user_id == 5


def test_shared_pin_first_match_disabled_is_not_skipped():
    a = User(user_id=5, name="Amy", role=Role.EMPLOYEE, pin_code="1111", is_active=False)
    b = User(user_id=9, name="Ben", role=Role.EMPLOYEE, pin_code="1111")
    auth = AuthService(_users(a, b))

    with pytest.raises(UserDisabled):
        auth.resolve_pin("1111")


def test_selector_flow_disambiguates_shared_pin():
    a = User(user_id=5, name="Amy", role=Role.EMPLOYEE, pin_code="1111")
    b = User(user_id=9, name="Ben", role=Role.EMPLOYEE, pin_code="1111")
    auth = AuthService(_users(a, b))

    assert auth.resolve_pin_for_user(9, "1111") == b


def test_selector_flow_wrong_pin_and_unknown_user():
    a = User(user_id=5, name="Amy", role=Role.EMPLOYEE, pin_code="1111")
    auth = AuthService(_users(a))

    with pytest.raises(InvalidCredential):
        auth.resolve_pin_for_user(5, "2222")
    with pytest.raises(InvalidCredential) as exc:
        auth.resolve_pin_for_user(42, "1111")
    assert str(exc.value) == "User not found"


def test_admin_login_only_accepts_active_admins():
    admin = User(user_id=1, name="Admin", role=Role.ADMIN, pin_code="1234")
    emp = User(user_id=2, name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    old = User(user_id=3, name="Old admin", role=Role.ADMIN, pin_code="9999", is_active=False)
    auth = AuthService(_users(admin, emp, old))

    assert auth.admin_login("1234") == admin
    with pytest.raises(InvalidCredential):
        auth.admin_login("5678")
    with pytest.raises(InvalidCredential):
        auth.admin_login("9999")

    assert auth.get_admin(1) == admin
    assert auth.get_admin(2) is None
    assert auth.get_admin(3) is None
