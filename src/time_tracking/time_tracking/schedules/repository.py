from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .model import ScheduleDay


class ScheduleRepository(Protocol):
    def list_for_users(self, user_ids: Iterable[int]) -> Sequence[ScheduleDay]:
        raise NotImplementedError

    def upsert_many(self, days: Iterable[ScheduleDay]) -> int:
        """Create or update (user_id, day_of_week) rows in one transaction.

        Returns the number of rows written.
        """

        raise NotImplementedError
