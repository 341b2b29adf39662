from __future__ import annotations

from datetime import datetime, timezone

import pytest
from werkzeug.security import generate_password_hash

from guard_roster.container import Container, build_container
from guard_roster.database.memory_store import InMemoryRecordStore
from guard_roster.guards.model import Guard


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 1, 18, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def container(store) -> Container:
    return build_container(store=store)


@pytest.fixture
def add_guard(container):
    def _add(guard_id: str, name: str, *, username: str | None = None, password: str = "secret1", active: bool = True):
        guard = Guard(
            guard_id=guard_id,
            name=name,
            username=username or guard_id,
            password_hash=generate_password_hash(password),
            active=active,
        )
        container.guards_repo.add(guard)
        return guard

    return _add
