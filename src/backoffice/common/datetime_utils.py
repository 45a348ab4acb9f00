from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date", field=field_name)


def parse_time(value: Optional[str], field_name: str = "time") -> Optional[time]:
    """Parse HH:MM or HH:MM:SS. Blank input means "not provided"."""
    v = (value or "").strip()
    if not v:
        return None
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"{field_name} must be HH:MM or HH:MM:SS", field=field_name)


def parse_iso_datetime(value: Optional[str], field_name: str = "timestamp") -> Optional[datetime]:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp", field=field_name)


def days_in_month(value: date) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
