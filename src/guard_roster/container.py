from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.service import AbsenceService
from .absences.store_absence_repository import StoreAbsenceRepository
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import InMemoryRecordStore
from .database.mysql_record_store import MySQLRecordStore
from .database.record_store import RecordStore
from .guards.service import AuthService, GuardService
from .guards.store_guard_repository import StoreAdminAccountRepository, StoreGuardRepository
from .schedules.service import ScheduleService
from .schedules.store_schedule_repository import StoreScheduleRepository
from .slots.service import SlotAvailabilityService


@dataclass(frozen=True)
class Container:
    store: RecordStore

    guards_repo: StoreGuardRepository
    admins_repo: StoreAdminAccountRepository
    schedules_repo: StoreScheduleRepository
    absences_repo: StoreAbsenceRepository

    auth_service: AuthService
    guard_service: GuardService
    schedule_service: ScheduleService
    slot_service: SlotAvailabilityService
    absence_service: AbsenceService


def build_store(*, backend: str, db_config: Optional[dict] = None) -> RecordStore:
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        return MySQLRecordStore(conn)
    raise ValueError(f"Unknown store backend: {backend!r}")


def build_container(*, store: RecordStore) -> Container:
    guards_repo = StoreGuardRepository(store)
    admins_repo = StoreAdminAccountRepository(store)
    schedules_repo = StoreScheduleRepository(store)
    absences_repo = StoreAbsenceRepository(store)

    auth_service = AuthService(guards_repo, admins_repo)
    guard_service = GuardService(guards_repo, schedules_repo, absences_repo, admins_repo)
    schedule_service = ScheduleService(schedules_repo, absences_repo)
    slot_service = SlotAvailabilityService(schedules_repo, absences_repo)
    absence_service = AbsenceService(absences_repo, schedules_repo, guards_repo)

    return Container(
        store=store,
        guards_repo=guards_repo,
        admins_repo=admins_repo,
        schedules_repo=schedules_repo,
        absences_repo=absences_repo,
        auth_service=auth_service,
        guard_service=guard_service,
        schedule_service=schedule_service,
        slot_service=slot_service,
        absence_service=absence_service,
    )
