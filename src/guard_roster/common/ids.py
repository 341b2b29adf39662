from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.ascii_lowercase + string.digits


def random_token(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_id(prefix: str) -> str:
    """``<prefix>_<epoch millis>_<9 random chars>``."""
    return f"{prefix}_{int(time.time() * 1000)}_{random_token(9)}"


def schedule_id_for(guard_id: str, year: int, month: int) -> str:
    """Deterministic schedule key: one schedule per guard per month."""
    return f"schedule_{guard_id}_{int(year)}_{int(month)}"
