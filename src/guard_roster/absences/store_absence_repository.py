from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import from_iso, to_iso
from ..core.enums import Collection, CoverageStatus, ShiftId
from ..database.record_store import RecordStore
from .model import Absence
from .repository import AbsenceRepository


def _to_record(a: Absence) -> dict:
    return {
        "id": a.absence_id,
        "scheduleId": a.schedule_id,
        "guardId": a.guard_id,
        "guardName": a.guard_name,
        "month": int(a.month),
        "year": int(a.year),
        "dateKey": a.date_key,
        "shift": a.shift.value,
        "reason": a.reason,
        "reportedAt": to_iso(a.reported_at),
        "reportedBy": a.reported_by,
        "coverageStatus": a.coverage_status.value,
        "coveredBy": a.covered_by,
        "coveredByName": a.covered_by_name,
        "coveredAt": to_iso(a.covered_at),
    }


def _from_record(r: dict) -> Absence:
    return Absence(
        absence_id=str(r["id"]),
        schedule_id=str(r["scheduleId"]),
        guard_id=str(r["guardId"]),
        guard_name=r.get("guardName") or "",
        month=int(r["month"]),
        year=int(r["year"]),
        date_key=r["dateKey"],
        shift=ShiftId(r["shift"]),
        reason=r.get("reason") or "",
        reported_at=from_iso(r.get("reportedAt")),
        reported_by=r.get("reportedBy") or "",
        coverage_status=CoverageStatus(r.get("coverageStatus") or CoverageStatus.OPEN.value),
        covered_by=r.get("coveredBy"),
        covered_by_name=r.get("coveredByName"),
        covered_at=from_iso(r.get("coveredAt")),
    )


class StoreAbsenceRepository(AbsenceRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, absence_id: str) -> Optional[Absence]:
        r = self._store.get(Collection.ABSENCES, str(absence_id))
        return _from_record(r) if r else None

    def list_all(self) -> Sequence[Absence]:
        return [_from_record(r) for r in self._store.get_all(Collection.ABSENCES)]

    def list_for_month(self, *, month: int, year: int) -> Sequence[Absence]:
        return [a for a in self.list_all() if a.month == int(month) and a.year == int(year)]

    def find_for_slot(self, *, schedule_id: str, date_key: str, shift: ShiftId) -> Optional[Absence]:
        for a in self.list_all():
            if a.schedule_id == schedule_id and a.date_key == date_key and a.shift == shift:
                return a
        return None

    def add(self, absence: Absence) -> str:
        return self._store.add(Collection.ABSENCES, _to_record(absence))

    def save(self, absence: Absence) -> str:
        return self._store.put(Collection.ABSENCES, _to_record(absence))

    def delete_for_guard(self, guard_id: str) -> int:
        removed = 0
        for a in self.list_all():
            if a.guard_id == guard_id and self._store.delete(Collection.ABSENCES, a.absence_id):
                removed += 1
        return removed
