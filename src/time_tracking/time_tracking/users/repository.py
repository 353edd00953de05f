from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def find_first_by_pin(self, pin_code: str, *, role: Optional[Role] = None, active_only: bool = False) -> Optional[User]:
        """First match by ascending user_id; PINs may be shared."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        """All users ordered by role, then name."""

        raise NotImplementedError

    def list_active_employees(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, role: Role, pin_code: str, hourly_pay: Optional[float] = None) -> int:
        raise NotImplementedError

    def update_user(self, user_id: int, *, name: str, hourly_pay: Optional[float]) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_pin(self, user_id: int, *, pin_code: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
