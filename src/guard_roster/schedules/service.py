from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..absences.repository import AbsenceRepository
from ..common.datetime_utils import in_month, now_utc
from ..common.ids import schedule_id_for
from ..common.validators import require_month
from ..core.enums import Role, ScheduleStatus, ShiftId
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..slots.service import covered_slots, occupied_slots
from .model import Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def _submitted_key(s: Schedule):
    return (s.submitted_at is not None, s.submitted_at)


class ScheduleService:
    """Lifecycle of a guard's monthly submission: pending -> approved, or deleted on reject."""

    def __init__(self, schedules: ScheduleRepository, absences: Optional[AbsenceRepository] = None):
        self._schedules = schedules
        self._absences = absences

    def _released(self, month: int, year: int) -> set:
        if not self._absences:
            return set()
        return covered_slots(self._absences.list_for_month(month=month, year=year))

    @staticmethod
    def _normalize_selections(selections: Mapping[str, object], month: int, year: int) -> dict[str, ShiftId]:
        if not selections:
            raise ValidationError("Select at least one shift")

        out: dict[str, ShiftId] = {}
        for key, shift in selections.items():
            if not in_month(key, month, year):
                raise ValidationError(f"{key} is outside the selected month")
            try:
                out[key] = ShiftId(shift)
            except ValueError:
                raise ValidationError(f"Invalid shift for {key}: {shift!r}")
        return out

    def _conflicts(self, schedule: Schedule, approved: Sequence[Schedule], released: set) -> list[str]:
        taken = occupied_slots((s for s in approved if s.schedule_id != schedule.schedule_id), released)
        return [
            f"{key} {shift.value} ({taken[(key, shift)].guard_name})"
            for key, shift in sorted(schedule.slots())
            if (key, shift) in taken
        ]

    def submit(
        self,
        *,
        guard_id: str,
        guard_name: str,
        month: int,
        year: int,
        selections: Mapping[str, object],
        now: Optional[datetime] = None,
    ) -> Schedule:
        """Create or overwrite the guard's schedule for the month and reset it to pending."""
        month, year = require_month(month, year)
        shifts = self._normalize_selections(selections, month, year)

        schedule = Schedule(
            schedule_id=schedule_id_for(guard_id, year, month),
            guard_id=guard_id,
            guard_name=guard_name,
            month=month,
            year=year,
            shifts=shifts,
            status=ScheduleStatus.PENDING,
            submitted_at=now or now_utc(),
        )
        self._schedules.save(schedule)
        logger.info("Schedule %s submitted with %d shifts", schedule.schedule_id, len(shifts))
        return schedule

    def get(self, schedule_id: str) -> Schedule:
        schedule = self._schedules.get(schedule_id)
        if not schedule:
            raise NotFoundError("Schedule does not exist")
        return schedule

    def find_for_guard(self, *, guard_id: str, month: int, year: int) -> Optional[Schedule]:
        month, year = require_month(month, year)
        return self._schedules.get(schedule_id_for(guard_id, year, month))

    def approve(
        self,
        *,
        current_role: Role,
        schedule_id: str,
        approver_id: str,
        now: Optional[datetime] = None,
    ) -> Schedule:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        schedule = self.get(schedule_id)
        if not schedule.is_approved:
            approved = self._schedules.list_for_month(
                month=schedule.month, year=schedule.year, status=ScheduleStatus.APPROVED
            )
            clashes = self._conflicts(schedule, approved, self._released(schedule.month, schedule.year))
            if clashes:
                raise ConflictError("Slots already assigned: " + ", ".join(clashes))

        schedule = replace(
            schedule,
            status=ScheduleStatus.APPROVED,
            approved_at=now or now_utc(),
            approved_by=approver_id,
        )
        self._schedules.save(schedule)
        logger.info("Schedule %s approved by %s", schedule.schedule_id, approver_id)
        return schedule

    def approve_all_pending(
        self,
        *,
        current_role: Role,
        month: int,
        year: int,
        approver_id: str,
        now: Optional[datetime] = None,
    ) -> int:
        """Approve every pending schedule of the month, oldest submission first.

        Schedules that would double-book an already approved slot are left
        pending. Returns the number approved.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        month, year = require_month(month, year)
        now = now or now_utc()
        approved = list(self._schedules.list_for_month(month=month, year=year, status=ScheduleStatus.APPROVED))
        pending = sorted(
            self._schedules.list_for_month(month=month, year=year, status=ScheduleStatus.PENDING),
            key=_submitted_key,
        )
        released = self._released(month, year)

        count = 0
        for schedule in pending:
            clashes = self._conflicts(schedule, approved, released)
            if clashes:
                logger.warning("Schedule %s left pending, conflicts: %s", schedule.schedule_id, ", ".join(clashes))
                continue

            schedule = replace(schedule, status=ScheduleStatus.APPROVED, approved_at=now, approved_by=approver_id)
            self._schedules.save(schedule)
            approved.append(schedule)
            count += 1

        logger.info("Approved %d of %d pending schedules for %d/%d", count, len(pending), month + 1, year)
        return count

    def reject(self, *, current_role: Role, schedule_id: str) -> None:
        """Delete the submission; the guard has to submit again from scratch."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        if not self._schedules.delete(schedule_id):
            raise NotFoundError("Schedule does not exist")
        logger.info("Schedule %s rejected", schedule_id)

    def list_pending(self) -> list[Schedule]:
        pending = [s for s in self._schedules.list_all() if s.status == ScheduleStatus.PENDING]
        pending.sort(key=_submitted_key, reverse=True)
        return pending

    def list_approved_for_guard(self, guard_id: str) -> list[Schedule]:
        out = list(self._schedules.list_for_guard(guard_id, status=ScheduleStatus.APPROVED))
        out.sort(key=lambda s: (s.year, s.month), reverse=True)
        return out

    def guard_summary(self, *, guard_id: str, month: int, year: int) -> dict:
        approved = self.list_approved_for_guard(guard_id)
        this_month = next((s for s in approved if s.month == month and s.year == year), None)
        return {
            "shifts_this_month": len(this_month.shifts) if this_month else 0,
            "shifts_total": sum(len(s.shifts) for s in approved),
        }
