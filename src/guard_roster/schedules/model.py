from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional

from ..core.enums import ScheduleStatus, ShiftId


@dataclass(frozen=True)
class Schedule:
    """One guard's availability (pending) or assignment (approved) for a month.

    ``shifts`` maps ``YYYY-MM-DD`` date keys of the month to a shift.
    """

    schedule_id: str
    guard_id: str
    guard_name: str
    month: int
    year: int
    shifts: Mapping[str, ShiftId] = field(default_factory=dict)
    status: ScheduleStatus = ScheduleStatus.PENDING
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == ScheduleStatus.APPROVED

    def slots(self) -> set[tuple[str, ShiftId]]:
        return set(self.shifts.items())
