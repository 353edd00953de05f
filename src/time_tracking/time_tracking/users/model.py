from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User (admin or employee).

    Note: Plain data object, no DB access. PINs are not unique.
    """

    user_id: int
    name: str
    role: Role
    pin_code: str
    is_active: bool = True
    hourly_pay: Optional[float] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def pin_length(self) -> int:
        return len(self.pin_code)
