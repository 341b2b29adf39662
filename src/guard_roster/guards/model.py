from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Guard:
    """Domain entity: a registered guard.

    Note: plain data object, no store access here.
    """

    guard_id: str
    name: str
    username: str
    password_hash: str
    phone: str = ""
    email: str = ""
    active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AdminAccount:
    """The single administrator credential kept in the config collection."""

    username: str
    password_hash: str
    name: str


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    username: str
    name: str
    role: Role
