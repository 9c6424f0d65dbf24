"""
Clinic-local calendar helpers.

Bookings are stored as absolute timestamps. Day and month filters are
interpreted on the clinic's wall clock, which is a fixed UTC offset taken
from settings.
"""

import re
from datetime import date, datetime, time, timedelta, timezone

from app.core.config import settings
from app.core.errors import ValidationError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def clinic_tz() -> timezone:
    return timezone(timedelta(hours=settings.CLINIC_UTC_OFFSET_HOURS))


def clinic_today() -> date:
    return datetime.now(clinic_tz()).date()


def ensure_clinic_tz(dt: datetime | None) -> datetime | None:
    """Naive datetimes are taken to be clinic wall-clock time."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=clinic_tz())
    return dt


def parse_month(month: str) -> tuple[int, int]:
    m = _MONTH_RE.match(month or "")
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise ValidationError("Month must be in YYYY-MM format", {"month": "expected YYYY-MM"})
    return int(m.group(1)), int(m.group(2))


def month_dates(month: str) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    year, mon = parse_month(month)
    first = date(year, mon, 1)
    nxt = date(year + 1, 1, 1) if mon == 12 else date(year, mon + 1, 1)
    return first, nxt


def month_bounds(month: str) -> tuple[datetime, datetime]:
    """Half-open [start, end) instants covering the month in clinic time."""
    first, nxt = month_dates(month)
    tz = clinic_tz()
    return datetime.combine(first, time.min, tzinfo=tz), datetime.combine(nxt, time.min, tzinfo=tz)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    tz = clinic_tz()
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


def month_key(dt: datetime) -> str:
    local = ensure_clinic_tz(dt).astimezone(clinic_tz())
    return f"{local.year:04d}-{local.month:02d}"
