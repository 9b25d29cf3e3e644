"""Utility functions for dates, ordering and ids."""

import uuid
from datetime import datetime, timezone

from .constants import UNKNOWN_DATE
from .models import Person


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string, the format the store uses."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def normalize_id(value) -> str | None:
    """Normalize an id hint to a stripped string, or None if blank."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def birth_order_key(person: Person) -> tuple[int, int]:
    """Sort key: birth year ascending, unknown years last.

    Use with a stable sort so persons with equal keys keep their input order.
    """
    if person.birth_year is None:
        return (1, 0)
    return (0, person.birth_year)


def sort_by_birth(persons) -> list[Person]:
    """Return a new list of persons ordered by birth_order_key."""
    return sorted(persons, key=birth_order_key)


def format_display_date(year: int | None, month: int | None, day: int | None) -> str:
    """Format date parts as DD/MM/YYYY, skipping missing parts."""
    if not year and not month and not day:
        return UNKNOWN_DATE

    parts = []
    if day:
        parts.append(f"{day:02d}")
    if month:
        parts.append(f"{month:02d}")
    if year:
        parts.append(str(year))
    return "/".join(parts)


def calculate_age(
    birth_year: int | None, death_year: int | None, current_year: int | None = None
) -> dict | None:
    """Age at death, or current age for the living. None without a birth year."""
    if not birth_year:
        return None
    if death_year:
        return {"age": death_year - birth_year, "is_deceased": True}
    if current_year is None:
        current_year = datetime.now(timezone.utc).year
    return {"age": current_year - birth_year, "is_deceased": False}


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def time_ago(value: str, now: datetime | None = None) -> str:
    """Describe a timestamp relative to now, e.g. '3 hours ago'."""
    if now is None:
        now = datetime.now(timezone.utc)
    seconds = int((now - parse_timestamp(value)).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return "just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 30:
        return _plural(days, "day")
    if days // 30 < 12:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")


def _plural(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"
