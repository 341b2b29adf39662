from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..absences.repository import AbsenceRepository
from ..common.datetime_utils import now_utc, parse_date_key
from ..common.ids import generate_id, random_token
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import (
    ADMIN_SESSION_ID,
    DEFAULT_ADMIN_NAME,
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_ADMIN_USERNAME,
    GENERATED_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..schedules.repository import ScheduleRepository
from .model import AdminAccount, Guard, SessionUser
from .repository import AdminAccountRepository, GuardRepository

logger = logging.getLogger(__name__)


def _verify(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # e.g. placeholder or corrupted hashes
        return False


def generate_username(name: str) -> str:
    """First initial plus last name (``"Ana Pérez"`` -> ``"apérez"``)."""
    parts = name.strip().lower().split()
    if len(parts) >= 2:
        return parts[0][0] + parts[-1]
    return parts[0]


class AuthService:
    """Use case: authenticate admin or guard, change a guard password."""

    def __init__(self, guards: GuardRepository, admins: AdminAccountRepository):
        self._guards = guards
        self._admins = admins

    def ensure_admin(self) -> bool:
        """Create the default admin account if none exists. Returns True if created."""
        if self._admins.get():
            return False
        self._admins.save(
            AdminAccount(
                username=DEFAULT_ADMIN_USERNAME,
                password_hash=generate_password_hash(DEFAULT_ADMIN_PASSWORD),
                name=DEFAULT_ADMIN_NAME,
            )
        )
        logger.info("Default admin account created (username=%s)", DEFAULT_ADMIN_USERNAME)
        return True

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = (username or "").strip()
        password = (password or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")

        admin = self._admins.get()
        if admin and username == admin.username and _verify(admin.password_hash, password):
            return SessionUser(user_id=ADMIN_SESSION_ID, username=admin.username, name=admin.name, role=Role.ADMIN)

        guard = self._guards.get_by_username(username)
        if not guard or not _verify(guard.password_hash, password):
            raise AuthenticationError("Wrong username or password")
        if not guard.active:
            raise AuthenticationError("Inactive user. Contact the administrator")

        return SessionUser(user_id=guard.guard_id, username=guard.username, name=guard.name, role=Role.GUARD)

    def change_password(
        self,
        *,
        guard_id: str,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        current_password = (current_password or "").strip()
        new_password = (new_password or "").strip()
        confirm_password = (confirm_password or "").strip()

        if not current_password or not new_password or not confirm_password:
            raise ValidationError("All fields are required")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")

        guard = self._guards.get_by_id(guard_id)
        if not guard or not _verify(guard.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")

        self._guards.save(replace(guard, password_hash=generate_password_hash(new_password)))
        logger.info("Password changed for guard %s", guard_id)


@dataclass(frozen=True)
class RegisteredGuard:
    guard: Guard
    password: str


class GuardService:
    """Use case: manage guards (admin)."""

    def __init__(
        self,
        guards: GuardRepository,
        schedules: ScheduleRepository,
        absences: AbsenceRepository,
        admins: Optional[AdminAccountRepository] = None,
    ):
        self._guards = guards
        self._schedules = schedules
        self._absences = absences
        self._admins = admins

    def _unique_username(self, base: str) -> str:
        taken = {g.username for g in self._guards.list_all()}
        if self._admins:
            admin = self._admins.get()
            if admin:
                taken.add(admin.username)

        username, n = base, 2
        while username in taken:
            username = f"{base}{n}"
            n += 1
        return username

    def register(
        self,
        *,
        current_role: Role,
        name: str,
        phone: str = "",
        email: str = "",
        now: Optional[datetime] = None,
    ) -> RegisteredGuard:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        name = require_non_empty(name, "Name")
        password = random_token(GENERATED_PASSWORD_LENGTH)
        guard = Guard(
            guard_id=generate_id("guard"),
            name=name,
            username=self._unique_username(generate_username(name)),
            password_hash=generate_password_hash(password),
            phone=(phone or "").strip(),
            email=(email or "").strip(),
            active=True,
            created_at=now or now_utc(),
        )
        self._guards.add(guard)
        logger.info("Guard registered: %s (%s)", guard.guard_id, guard.username)
        return RegisteredGuard(guard=guard, password=password)

    def get(self, guard_id: str) -> Guard:
        guard = self._guards.get_by_id(guard_id)
        if not guard:
            raise NotFoundError("Guard does not exist")
        return guard

    def list_guards(self) -> Sequence[Guard]:
        return list(self._guards.list_all())

    def count_active(self) -> int:
        return sum(1 for g in self._guards.list_all() if g.active)

    def set_active(self, *, current_role: Role, guard_id: str, active: bool) -> Guard:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        guard = replace(self.get(guard_id), active=bool(active))
        self._guards.save(guard)
        logger.info("Guard %s active=%s", guard_id, guard.active)
        return guard

    def delete_guard(self, *, current_role: Role, guard_id: str, today: Optional[date] = None) -> None:
        """Hard-delete a guard together with their schedules and absences.

        Refused while the guard is covering someone else's shift from today on:
        the slot would be left without anyone. Deactivate the guard instead.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        self.get(guard_id)
        today = today or now_utc().date()
        upcoming = [
            a
            for a in self._absences.list_all()
            if a.covered_by == guard_id and parse_date_key(a.date_key) >= today
        ]
        if upcoming:
            raise ConflictError(
                f"Guard is covering {len(upcoming)} upcoming shift(s); deactivate the guard instead"
            )

        removed_schedules = self._schedules.delete_for_guard(guard_id)
        removed_absences = self._absences.delete_for_guard(guard_id)
        self._guards.delete_by_id(guard_id)
        logger.info(
            "Guard %s deleted (schedules=%d, absences=%d)",
            guard_id,
            removed_schedules,
            removed_absences,
        )
