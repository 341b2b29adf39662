from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ScheduleStatus
from .model import Schedule


class ScheduleRepository(Protocol):
    def get(self, schedule_id: str) -> Optional[Schedule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Schedule]:
        raise NotImplementedError

    def list_for_month(self, *, month: int, year: int, status: Optional[ScheduleStatus] = None) -> Sequence[Schedule]:
        raise NotImplementedError

    def list_for_guard(self, guard_id: str, *, status: Optional[ScheduleStatus] = None) -> Sequence[Schedule]:
        raise NotImplementedError

    def save(self, schedule: Schedule) -> str:
        """Create or replace a schedule at its id.

        Returns schedule_id.
        """

        raise NotImplementedError

    def delete(self, schedule_id: str) -> bool:
        raise NotImplementedError

    def delete_for_guard(self, guard_id: str) -> int:
        raise NotImplementedError
