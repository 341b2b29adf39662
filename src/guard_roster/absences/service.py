from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.ids import generate_id, schedule_id_for
from ..common.validators import require_month, require_non_empty
from ..core.constants import SYSTEM_APPROVER
from ..core.enums import CoverageStatus, Role, ScheduleStatus, ShiftId
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..guards.repository import GuardRepository
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository
from .model import Absence
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)


class AbsenceService:
    """Absence reports against approved slots and coverage claims by other guards."""

    def __init__(self, absences: AbsenceRepository, schedules: ScheduleRepository, guards: GuardRepository):
        self._absences = absences
        self._schedules = schedules
        self._guards = guards

    def get(self, absence_id: str) -> Absence:
        absence = self._absences.get(absence_id)
        if not absence:
            raise NotFoundError("Absence does not exist")
        return absence

    def report_absence(
        self,
        *,
        current_role: Role,
        reporter_id: str,
        schedule_id: str,
        date_key: str,
        shift: str,
        reason: str,
        now: Optional[datetime] = None,
    ) -> Absence:
        """Open a coverage request for one slot of an approved schedule.

        The slot stays in the schedule; the absence sits beside it.
        """
        reason = require_non_empty(reason, "Reason")
        try:
            shift = ShiftId(shift)
        except ValueError:
            raise ValidationError("Select a shift")

        schedule = self._schedules.get(schedule_id)
        if not schedule:
            raise NotFoundError("Schedule does not exist")
        if current_role == Role.GUARD and schedule.guard_id != reporter_id:
            raise AuthorizationError("You can only report absences on your own schedule")
        if schedule.status != ScheduleStatus.APPROVED:
            raise ValidationError("Absences can only be reported on approved schedules")
        if schedule.shifts.get(date_key) != shift:
            raise ValidationError(f"{date_key} {shift.value} is not assigned in this schedule")

        if self._absences.find_for_slot(schedule_id=schedule.schedule_id, date_key=date_key, shift=shift):
            raise ConflictError("An absence was already reported for this shift")

        absence = Absence(
            absence_id=generate_id("absence"),
            schedule_id=schedule.schedule_id,
            guard_id=schedule.guard_id,
            guard_name=schedule.guard_name,
            month=schedule.month,
            year=schedule.year,
            date_key=date_key,
            shift=shift,
            reason=reason,
            reported_at=now or now_utc(),
            reported_by=reporter_id,
            coverage_status=CoverageStatus.OPEN,
        )
        self._absences.add(absence)
        logger.info("Absence %s reported for %s %s (%s)", absence.absence_id, date_key, shift.value, schedule.guard_id)
        return absence

    def accept_coverage(
        self,
        *,
        absence_id: str,
        claiming_guard_id: str,
        now: Optional[datetime] = None,
    ) -> Absence:
        """Hand an open absence's slot to another guard.

        The claimer's schedule for that month receives the slot; when the
        claimer has none yet, one is created already approved.
        """
        now = now or now_utc()
        absence = self.get(absence_id)
        if absence.coverage_status == CoverageStatus.COVERED:
            raise ConflictError(f"Shift already covered by {absence.covered_by_name}")
        if absence.guard_id == claiming_guard_id:
            raise ValidationError("You cannot cover your own absence")

        guard = self._guards.get_by_id(claiming_guard_id)
        if not guard:
            raise NotFoundError("Guard does not exist")

        own = self._schedules.get(schedule_id_for(guard.guard_id, absence.year, absence.month))
        # One shift per guard per day, whether the schedule is approved or still pending.
        if own and absence.date_key in own.shifts:
            raise ConflictError("You already have a shift that day")

        covered = replace(
            absence,
            coverage_status=CoverageStatus.COVERED,
            covered_by=guard.guard_id,
            covered_by_name=guard.name,
            covered_at=now,
        )
        self._absences.save(covered)

        if own is None:
            own = Schedule(
                schedule_id=schedule_id_for(guard.guard_id, absence.year, absence.month),
                guard_id=guard.guard_id,
                guard_name=guard.name,
                month=absence.month,
                year=absence.year,
                shifts={},
                status=ScheduleStatus.APPROVED,
                submitted_at=now,
                approved_at=now,
                approved_by=SYSTEM_APPROVER,
            )
        self._schedules.save(replace(own, shifts={**own.shifts, absence.date_key: absence.shift}))

        logger.info("Absence %s covered by %s", absence.absence_id, guard.guard_id)
        return covered

    def list_open_for(self, guard_id: str) -> list[Absence]:
        """Open coverage requests a guard can claim (everyone's but their own)."""
        return [a for a in self._absences.list_all() if a.is_open and a.guard_id != guard_id]

    def count_open(self) -> int:
        return sum(1 for a in self._absences.list_all() if a.is_open)

    def list_for_month(self, month: int, year: int) -> list[Absence]:
        month, year = require_month(month, year)
        return list(self._absences.list_for_month(month=month, year=year))
