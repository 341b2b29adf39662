from __future__ import annotations

from typing import Collection, Iterable, Mapping, Optional

from ..absences.model import Absence
from ..absences.repository import AbsenceRepository
from ..common.datetime_utils import in_month, month_date_keys, parse_date_key
from ..common.validators import require_month
from ..core.constants import SHIFT_TIMES, SLOT_CAPACITY
from ..core.enums import ScheduleStatus, ShiftId
from ..core.exceptions import ValidationError
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository

Slot = tuple[str, ShiftId]
FillCounts = dict[str, dict[ShiftId, int]]


def occupied_slots(
    schedules: Iterable[Schedule],
    released: Collection[tuple[str, str, ShiftId]] = (),
) -> dict[Slot, Schedule]:
    """Map each (date_key, shift) held by the given schedules to the first holder.

    ``released`` holds ``(schedule_id, date_key, shift)`` triples whose holder
    handed the slot over to a covering guard; those do not occupy the slot.
    """
    out: dict[Slot, Schedule] = {}
    for schedule in schedules:
        for key, shift in schedule.shifts.items():
            if (schedule.schedule_id, key, shift) in released:
                continue
            out.setdefault((key, shift), schedule)
    return out


def covered_slots(absences: Iterable[Absence]) -> set[tuple[str, str, ShiftId]]:
    """``(schedule_id, date_key, shift)`` of every absence someone already covered."""
    return {(a.schedule_id, a.date_key, a.shift) for a in absences if not a.is_open}


def _require_shift(shift) -> ShiftId:
    try:
        return ShiftId(shift)
    except ValueError:
        raise ValidationError(f"Invalid shift: {shift!r}")


class SlotAvailabilityService:
    """Computes slot fill state for a month from approved schedules."""

    def __init__(self, schedules: ScheduleRepository, absences: Optional[AbsenceRepository] = None):
        self._schedules = schedules
        self._absences = absences

    def compute_fill_counts(self, month: int, year: int) -> FillCounts:
        month, year = require_month(month, year)
        counts: FillCounts = {key: {s: 0 for s in ShiftId} for key in month_date_keys(month, year)}

        for schedule in self._schedules.list_for_month(month=month, year=year, status=ScheduleStatus.APPROVED):
            for key, shift in schedule.shifts.items():
                if key in counts:
                    counts[key][shift] += 1
        return counts

    @staticmethod
    def is_full(count: int) -> bool:
        return count >= SLOT_CAPACITY

    def is_selectable(self, *, guard_id: str, date_key: str, shift, month: int, year: int) -> bool:
        """A slot is selectable when it is not full, or the guard already holds it."""
        shift = _require_shift(shift)
        counts = self.compute_fill_counts(month, year)
        if date_key not in counts:
            raise ValidationError("Date is outside the selected month")
        if not self.is_full(counts[date_key][shift]):
            return True

        return any(
            s.guard_id == guard_id and s.shifts.get(date_key) == shift
            for s in self._schedules.list_for_month(month=month, year=year, status=ScheduleStatus.APPROVED)
        )

    @staticmethod
    def toggle_selection(
        selection: Mapping[str, ShiftId],
        date_key: str,
        shift,
        *,
        month: int,
        year: int,
    ) -> dict[str, ShiftId]:
        """Select or deselect ``shift`` on every date of the month sharing ``date_key``'s weekday.

        Selecting a shift the date does not hold yet applies it to all those
        dates; picking the shift it already holds clears them. Works on the
        in-progress selection only and returns a new mapping.
        """
        month, year = require_month(month, year)
        shift = _require_shift(shift)
        if not in_month(date_key, month, year):
            raise ValidationError("Date is outside the selected month")

        out = {k: ShiftId(v) for k, v in selection.items()}
        selecting = out.get(date_key) != shift
        weekday = parse_date_key(date_key).weekday()

        for key in month_date_keys(month, year):
            if parse_date_key(key).weekday() != weekday:
                continue
            if selecting:
                out[key] = shift
            else:
                out.pop(key, None)
        return out

    def availability_grid(
        self,
        *,
        guard_id: str,
        month: int,
        year: int,
        selection: Mapping[str, ShiftId],
    ) -> list[dict]:
        counts = self.compute_fill_counts(month, year)
        own = {
            slot
            for s in self._schedules.list_for_month(month=month, year=year, status=ScheduleStatus.APPROVED)
            if s.guard_id == guard_id
            for slot in s.shifts.items()
        }

        days: list[dict] = []
        for key, per_shift in counts.items():
            cells = []
            for shift, count in per_shift.items():
                full = self.is_full(count)
                selected = selection.get(key) == shift
                cells.append(
                    {
                        "shift": shift.value,
                        "time": SHIFT_TIMES[shift],
                        "count": count,
                        "full": full,
                        "selected": selected,
                        "selectable": not full or selected or (key, shift) in own,
                    }
                )
            days.append({"date_key": key, "weekday": parse_date_key(key).weekday(), "shifts": cells})
        return days

    def month_roster(self, month: int, year: int) -> list[dict]:
        """Admin monthly view: who holds each slot and whether they reported absent."""
        month, year = require_month(month, year)
        schedules = sorted(
            self._schedules.list_for_month(month=month, year=year),
            key=lambda s: 0 if s.is_approved else 1,
        )
        holders = occupied_slots(schedules)
        by_id = {s.schedule_id: s for s in schedules}

        # After a coverage two schedules hold the slot; the absent one is shown.
        absences: dict[Slot, Absence] = {}
        if self._absences:
            for a in self._absences.list_for_month(month=month, year=year):
                schedule = by_id.get(a.schedule_id)
                if schedule and schedule.shifts.get(a.date_key) == a.shift:
                    absences[(a.date_key, a.shift)] = a

        days: list[dict] = []
        for key in month_date_keys(month, year):
            cells = []
            for shift in ShiftId:
                absence = absences.get((key, shift))
                holder = by_id[absence.schedule_id] if absence else holders.get((key, shift))
                cells.append(
                    {
                        "shift": shift.value,
                        "time": SHIFT_TIMES[shift],
                        "guard_id": holder.guard_id if holder else None,
                        "guard_name": holder.guard_name if holder else None,
                        "status": holder.status.value if holder else None,
                        "absent": absence is not None,
                        "coverage_status": absence.coverage_status.value if absence else None,
                        "covered_by_name": absence.covered_by_name if absence else None,
                    }
                )
            days.append({"date_key": key, "weekday": parse_date_key(key).weekday(), "shifts": cells})
        return days
