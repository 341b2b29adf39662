from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ShiftId
from .model import Absence


class AbsenceRepository(Protocol):
    def get(self, absence_id: str) -> Optional[Absence]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Absence]:
        raise NotImplementedError

    def list_for_month(self, *, month: int, year: int) -> Sequence[Absence]:
        raise NotImplementedError

    def find_for_slot(self, *, schedule_id: str, date_key: str, shift: ShiftId) -> Optional[Absence]:
        raise NotImplementedError

    def add(self, absence: Absence) -> str:
        raise NotImplementedError

    def save(self, absence: Absence) -> str:
        raise NotImplementedError

    def delete_for_guard(self, guard_id: str) -> int:
        raise NotImplementedError
