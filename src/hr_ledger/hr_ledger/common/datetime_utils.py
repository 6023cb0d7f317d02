from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(field_name, "expected a date in YYYY-MM-DD format")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(field_name, "expected a date in YYYY-MM-DD format")


def parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_iso_date(value, field_name)


def parse_clock_time(value: Optional[str], field_name: str) -> Optional[time]:
    """Parse HH:MM or HH:MM:SS into a time of day; empty means unset."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(field_name, "expected a time in HH:MM format")
    v = value.strip()
    if not v:
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(field_name, "expected a time in HH:MM format")


def span_seconds(work_date: date, start: time, end: time) -> float:
    """Signed seconds between two times of day on the same date."""
    return (datetime.combine(work_date, end) - datetime.combine(work_date, start)).total_seconds()


def inclusive_days(start: date, end: date) -> int:
    """Calendar days from start to end, both ends counted."""
    return (end - start).days + 1


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()
