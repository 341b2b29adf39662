from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_month(month: int, year: int) -> tuple[int, int]:
    """Validate a 0-indexed month and a year."""
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be integers")
    if not 0 <= month <= 11:
        raise ValidationError("Month must be between 0 and 11")
    if year < 1:
        raise ValidationError("Invalid year")
    return month, year
