from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CoverageStatus, ShiftId


@dataclass(frozen=True)
class Absence:
    """A guard will miss an approved slot; another guard may cover it."""

    absence_id: str
    schedule_id: str
    guard_id: str
    guard_name: str
    month: int
    year: int
    date_key: str
    shift: ShiftId
    reason: str
    reported_at: datetime
    reported_by: str
    coverage_status: CoverageStatus = CoverageStatus.OPEN
    covered_by: Optional[str] = None
    covered_by_name: Optional[str] = None
    covered_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.coverage_status == CoverageStatus.OPEN
