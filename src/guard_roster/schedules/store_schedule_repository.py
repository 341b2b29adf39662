from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import from_iso, to_iso
from ..core.enums import Collection, ScheduleStatus, ShiftId
from ..database.record_store import RecordStore
from .model import Schedule
from .repository import ScheduleRepository


def _to_record(s: Schedule) -> dict:
    return {
        "id": s.schedule_id,
        "guardId": s.guard_id,
        "guardName": s.guard_name,
        "month": int(s.month),
        "year": int(s.year),
        "shifts": {k: ShiftId(v).value for k, v in s.shifts.items()},
        "status": s.status.value,
        "submittedAt": to_iso(s.submitted_at),
        "approvedAt": to_iso(s.approved_at),
        "approvedBy": s.approved_by,
    }


def _from_record(r: dict) -> Schedule:
    return Schedule(
        schedule_id=str(r["id"]),
        guard_id=str(r["guardId"]),
        guard_name=r.get("guardName") or "",
        month=int(r["month"]),
        year=int(r["year"]),
        # Empty values mean "no shift" in older records.
        shifts={k: ShiftId(v) for k, v in (r.get("shifts") or {}).items() if v},
        status=ScheduleStatus(r.get("status") or ScheduleStatus.PENDING.value),
        submitted_at=from_iso(r.get("submittedAt")),
        approved_at=from_iso(r.get("approvedAt")),
        approved_by=r.get("approvedBy"),
    )


class StoreScheduleRepository(ScheduleRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, schedule_id: str) -> Optional[Schedule]:
        r = self._store.get(Collection.SCHEDULES, str(schedule_id))
        return _from_record(r) if r else None

    def list_all(self) -> Sequence[Schedule]:
        return [_from_record(r) for r in self._store.get_all(Collection.SCHEDULES)]

    def list_for_month(self, *, month: int, year: int, status: Optional[ScheduleStatus] = None) -> Sequence[Schedule]:
        return [
            s
            for s in self.list_all()
            if s.month == int(month) and s.year == int(year) and (status is None or s.status == status)
        ]

    def list_for_guard(self, guard_id: str, *, status: Optional[ScheduleStatus] = None) -> Sequence[Schedule]:
        return [s for s in self.list_all() if s.guard_id == guard_id and (status is None or s.status == status)]

    def save(self, schedule: Schedule) -> str:
        return self._store.put(Collection.SCHEDULES, _to_record(schedule))

    def delete(self, schedule_id: str) -> bool:
        return self._store.delete(Collection.SCHEDULES, str(schedule_id))

    def delete_for_guard(self, guard_id: str) -> int:
        removed = 0
        for s in self.list_for_guard(guard_id):
            if self._store.delete(Collection.SCHEDULES, s.schedule_id):
                removed += 1
        return removed
