from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AdminAccount, Guard


class GuardRepository(Protocol):
    """Repository interface for guards.

    Services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, guard_id: str) -> Optional[Guard]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Guard]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Guard]:
        raise NotImplementedError

    def add(self, guard: Guard) -> str:
        raise NotImplementedError

    def save(self, guard: Guard) -> str:
        raise NotImplementedError

    def delete_by_id(self, guard_id: str) -> bool:
        raise NotImplementedError


class AdminAccountRepository(Protocol):
    def get(self) -> Optional[AdminAccount]:
        raise NotImplementedError

    def save(self, account: AdminAccount) -> None:
        raise NotImplementedError
