from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Session role used for authorization checks."""

    ADMIN = "admin"
    GUARD = "guard"


class ShiftId(str, Enum):
    """The closed set of daily shifts."""

    SHIFT1 = "shift1"
    SHIFT2 = "shift2"
    SHIFT3 = "shift3"


class ScheduleStatus(str, Enum):
    """Monthly submission state. Rejected schedules are deleted, not stored."""

    PENDING = "pending"
    APPROVED = "approved"


class CoverageStatus(str, Enum):
    OPEN = "open"
    COVERED = "covered"


class Collection(str, Enum):
    """Record store collections."""

    GUARDS = "guards"
    SCHEDULES = "schedules"
    ABSENCES = "absences"
    CONFIG = "config"

    @property
    def key_field(self) -> str:
        return "key" if self is Collection.CONFIG else "id"
