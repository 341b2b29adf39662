from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import from_iso, to_iso
from ..core.constants import ADMIN_CONFIG_KEY
from ..core.enums import Collection, Role
from ..database.record_store import RecordStore
from .model import AdminAccount, Guard
from .repository import AdminAccountRepository, GuardRepository


def _to_record(guard: Guard) -> dict:
    return {
        "id": guard.guard_id,
        "name": guard.name,
        "username": guard.username,
        "password": guard.password_hash,
        "phone": guard.phone,
        "email": guard.email,
        "role": Role.GUARD.value,
        "active": bool(guard.active),
        "createdAt": to_iso(guard.created_at),
    }


def _from_record(r: dict) -> Guard:
    return Guard(
        guard_id=str(r["id"]),
        name=r.get("name") or "",
        username=r.get("username") or "",
        password_hash=r.get("password") or "",
        phone=r.get("phone") or "",
        email=r.get("email") or "",
        active=bool(r.get("active", True)),
        created_at=from_iso(r.get("createdAt")),
    )


class StoreGuardRepository(GuardRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get_by_id(self, guard_id: str) -> Optional[Guard]:
        r = self._store.get(Collection.GUARDS, str(guard_id))
        return _from_record(r) if r else None

    def get_by_username(self, username: str) -> Optional[Guard]:
        for guard in self.list_all():
            if guard.username == username:
                return guard
        return None

    def list_all(self) -> Sequence[Guard]:
        return [_from_record(r) for r in self._store.get_all(Collection.GUARDS)]

    def add(self, guard: Guard) -> str:
        return self._store.add(Collection.GUARDS, _to_record(guard))

    def save(self, guard: Guard) -> str:
        return self._store.put(Collection.GUARDS, _to_record(guard))

    def delete_by_id(self, guard_id: str) -> bool:
        return self._store.delete(Collection.GUARDS, str(guard_id))


class StoreAdminAccountRepository(AdminAccountRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self) -> Optional[AdminAccount]:
        r = self._store.get(Collection.CONFIG, ADMIN_CONFIG_KEY)
        if not r:
            return None
        return AdminAccount(username=r["username"], password_hash=r["password"], name=r.get("name") or "")

    def save(self, account: AdminAccount) -> None:
        self._store.put(
            Collection.CONFIG,
            {
                "key": ADMIN_CONFIG_KEY,
                "username": account.username,
                "password": account.password_hash,
                "role": Role.ADMIN.value,
                "name": account.name,
            },
        )
