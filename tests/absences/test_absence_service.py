from __future__ import annotations

import pytest

from guard_roster.core.constants import SYSTEM_APPROVER
from guard_roster.core.enums import CoverageStatus, Role, ScheduleStatus, ShiftId
from guard_roster.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

MARCH = 2


@pytest.fixture
def approved_ana(container, add_guard):
    add_guard("g1", "Ana Pérez")
    svc = container.schedule_service
    s = svc.submit(
        guard_id="g1",
        guard_name="Ana Pérez",
        month=MARCH,
        year=2025,
        selections={"2025-03-05": "shift1", "2025-03-12": "shift1"},
    )
    return svc.approve(current_role=Role.ADMIN, schedule_id=s.schedule_id, approver_id="admin")


def _report(container, schedule, *, date_key="2025-03-05", shift="shift1", reason="illness", now=None):
    return container.absence_service.report_absence(
        current_role=Role.GUARD,
        reporter_id=schedule.guard_id,
        schedule_id=schedule.schedule_id,
        date_key=date_key,
        shift=shift,
        reason=reason,
        now=now,
    )


def test_report_absence_opens_coverage_and_keeps_the_slot(container, approved_ana, fixed_now):
    absence = _report(container, approved_ana, now=fixed_now)

    assert absence.coverage_status == CoverageStatus.OPEN
    assert absence.absence_id.startswith("absence_")
    assert (absence.guard_id, absence.guard_name) == ("g1", "Ana Pérez")
    assert (absence.month, absence.year) == (MARCH, 2025)
    assert absence.reported_at == fixed_now
    assert container.absence_service.get(absence.absence_id) == absence
    assert container.schedule_service.get(approved_ana.schedule_id).shifts["2025-03-05"] == ShiftId.SHIFT1


def test_covering_guard_without_schedule_gets_an_approved_one(container, approved_ana, add_guard, fixed_now):
    add_guard("g2", "Luis Gómez")
    absence = _report(container, approved_ana)

    covered = container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="g2", now=fixed_now)

    assert covered.coverage_status == CoverageStatus.COVERED
    assert (covered.covered_by, covered.covered_by_name, covered.covered_at) == ("g2", "Luis Gómez", fixed_now)
    luis = container.schedule_service.find_for_guard(guard_id="g2", month=MARCH, year=2025)
    assert luis.shifts == {"2025-03-05": ShiftId.SHIFT1}
    assert luis.status == ScheduleStatus.APPROVED
    assert luis.approved_by == SYSTEM_APPROVER
    assert container.absence_service.count_open() == 0


def test_covering_guard_with_schedule_keeps_existing_shifts(container, approved_ana, add_guard):
    add_guard("g2", "Luis Gómez")
    svc = container.schedule_service
    s = svc.submit(guard_id="g2", guard_name="Luis Gómez", month=MARCH, year=2025, selections={"2025-03-06": "shift2"})
    svc.approve(current_role=Role.ADMIN, schedule_id=s.schedule_id, approver_id="admin")
    absence = _report(container, approved_ana)

    container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="g2")

    luis = svc.get(s.schedule_id)
    assert luis.shifts == {"2025-03-05": ShiftId.SHIFT1, "2025-03-06": ShiftId.SHIFT2}
    assert luis.approved_by == "admin"


def test_guard_already_working_that_day_cannot_cover(container, approved_ana, add_guard):
    add_guard("g3", "Marta Ruiz")
    svc = container.schedule_service
    s = svc.submit(guard_id="g3", guard_name="Marta Ruiz", month=MARCH, year=2025, selections={"2025-03-05": "shift3"})
    svc.approve(current_role=Role.ADMIN, schedule_id=s.schedule_id, approver_id="admin")
    absence = _report(container, approved_ana)

    with pytest.raises(ConflictError):
        container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="g3")

    assert container.absence_service.get(absence.absence_id).coverage_status == CoverageStatus.OPEN
    assert svc.get(s.schedule_id).shifts == {"2025-03-05": ShiftId.SHIFT3}


def test_second_claim_on_covered_absence_is_rejected(container, approved_ana, add_guard):
    add_guard("g2", "Luis Gómez")
    add_guard("g3", "Marta Ruiz")
    absence = _report(container, approved_ana)
    container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="g2")

    with pytest.raises(ConflictError):
        container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="g3")

    assert container.absence_service.get(absence.absence_id).covered_by == "g2"
    assert container.schedule_service.find_for_guard(guard_id="g3", month=MARCH, year=2025) is None


def test_guard_cannot_cover_own_absence(container, approved_ana):
    absence = _report(container, approved_ana)

    with pytest.raises(ValidationError):
        container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="g1")


def test_accept_coverage_unknown_ids(container, approved_ana):
    with pytest.raises(NotFoundError):
        container.absence_service.accept_coverage(absence_id="absence_missing", claiming_guard_id="g1")

    absence = _report(container, approved_ana)
    with pytest.raises(NotFoundError):
        container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="ghost")


@pytest.mark.parametrize(
    "date_key,shift,reason",
    [
        ("2025-03-05", "shift1", "   "),
        ("2025-03-05", "shift2", "illness"),
        ("2025-03-06", "shift1", "illness"),
        ("2025-03-05", "", "illness"),
    ],
)
def test_report_absence_validation(container, approved_ana, date_key, shift, reason):
    with pytest.raises(ValidationError):
        _report(container, approved_ana, date_key=date_key, shift=shift, reason=reason)

    assert container.absence_service.count_open() == 0


def test_report_absence_requires_approved_schedule(container, add_guard):
    s = container.schedule_service.submit(
        guard_id="g1", guard_name="Ana", month=MARCH, year=2025, selections={"2025-03-05": "shift1"}
    )

    with pytest.raises(ValidationError):
        _report(container, s)
    with pytest.raises(NotFoundError):
        container.absence_service.report_absence(
            current_role=Role.ADMIN,
            reporter_id="admin",
            schedule_id="schedule_nobody_2025_2",
            date_key="2025-03-05",
            shift="shift1",
            reason="illness",
        )


def test_same_slot_cannot_be_reported_twice(container, approved_ana):
    _report(container, approved_ana)

    with pytest.raises(ConflictError):
        _report(container, approved_ana, reason="still ill")


def test_guard_cannot_report_on_someone_elses_schedule_but_admin_can(container, approved_ana):
    with pytest.raises(AuthorizationError):
        container.absence_service.report_absence(
            current_role=Role.GUARD,
            reporter_id="g2",
            schedule_id=approved_ana.schedule_id,
            date_key="2025-03-05",
            shift="shift1",
            reason="illness",
        )

    absence = container.absence_service.report_absence(
        current_role=Role.ADMIN,
        reporter_id="admin",
        schedule_id=approved_ana.schedule_id,
        date_key="2025-03-05",
        shift="shift1",
        reason="called in sick",
    )
    assert absence.reported_by == "admin"
    assert absence.guard_id == "g1"


def test_open_requests_exclude_own_and_covered(container, approved_ana, add_guard):
    add_guard("g2", "Luis Gómez")
    first = _report(container, approved_ana)
    second = _report(container, approved_ana, date_key="2025-03-12")
    container.absence_service.accept_coverage(absence_id=first.absence_id, claiming_guard_id="g2")

    assert [a.absence_id for a in container.absence_service.list_open_for("g2")] == [second.absence_id]
    assert container.absence_service.list_open_for("g1") == []
    assert len(container.absence_service.list_for_month(MARCH, 2025)) == 2
    assert container.absence_service.list_for_month(3, 2025) == []


def test_pending_shift_on_the_same_day_blocks_coverage(container, approved_ana, add_guard):
    add_guard("g2", "Luis Gómez")
    svc = container.schedule_service
    s = svc.submit(guard_id="g2", guard_name="Luis Gómez", month=MARCH, year=2025, selections={"2025-03-05": "shift3"})
    absence = _report(container, approved_ana)

    with pytest.raises(ConflictError):
        container.absence_service.accept_coverage(absence_id=absence.absence_id, claiming_guard_id="g2")

    assert svc.get(s.schedule_id).shifts == {"2025-03-05": ShiftId.SHIFT3}
    assert container.absence_service.get(absence.absence_id).is_open
