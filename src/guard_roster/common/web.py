from __future__ import annotations

import logging
from datetime import date
from functools import wraps

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .validators import require_month

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def fail(detail: str, status: int):
    return jsonify({"success": False, "detail": detail}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Please log in to continue", 401)
            if session.get("role") != role.value:
                return fail("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = role_required(Role.ADMIN)
guard_required = role_required(Role.GUARD)


def current_role() -> Role:
    return Role(session.get("role"))


def month_args(source) -> tuple[int, int]:
    """Read 0-indexed ``month`` and ``year`` from a request mapping, defaulting to today."""
    today = date.today()
    month = source.get("month", today.month - 1)
    year = source.get("year", today.year)
    return require_month(month, year)


def register_error_handlers(app: Flask) -> None:
    """Map domain errors raised by services to JSON responses."""

    @app.errorhandler(StoreError)
    def _store_error(e: StoreError):
        logger.error("Store error: %s", e)
        return jsonify({"success": False, "warning": True, "detail": f"Changes may not have been saved: {e}"}), 503

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return fail(str(e), status)
        return fail(str(e), 400)
