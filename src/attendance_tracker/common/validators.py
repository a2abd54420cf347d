from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

T = TypeVar("T")


def clean_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


def parse_time(value: Any, field_name: str) -> Optional[time]:
    """Parse 'HH:MM' or 'HH:MM:SS'; blank means "not provided"."""
    if isinstance(value, time):
        return value
    v = (value or "").strip() if isinstance(value, str) or value is None else None
    if v is None:
        raise ValidationError(f"{field_name} must be a time (HH:MM)")
    if not v:
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"{field_name} must be a time (HH:MM)")


def parse_datetime(value: Any, field_name: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; blank means "not provided"."""
    if isinstance(value, datetime):
        return value
    v = (value or "").strip() if isinstance(value, str) or value is None else None
    if v is None:
        raise ValidationError(f"{field_name} must be an ISO timestamp")
    if not v:
        return None
    try:
        return datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO timestamp")


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def parse_date(value: Any, field_name: str) -> Optional[date]:
    """Parse YYYY-MM-DD; blank means "not provided"."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    v = (value or "").strip() if isinstance(value, str) or value is None else None
    if v is None:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")
    if not v:
        return None
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def require(value: Optional[T], field_name: str) -> T:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    return value
