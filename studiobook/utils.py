"""Shared utilities used across the studio booking manager."""

import calendar
import re
import time
from datetime import date, datetime

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
MINUTES_PER_DAY = 24 * 60


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("98401 23456")
        '9840123456'
        >>> normalize_phone("+91 (984) 012-3456")
        '+919840123456'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def is_valid_date(value: str) -> bool:
    """Check a string is a calendar date in YYYY-MM-DD format."""
    try:
        datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError:
        return False
    # strptime tolerates single-digit fields; stored dates must stay fixed-width
    return len(value.strip()) == 10


def is_valid_time(value: str) -> bool:
    """Check a string is a 24-hour HH:MM time of day."""
    try:
        datetime.strptime(value.strip(), TIME_FORMAT)
    except ValueError:
        return False
    return len(value.strip()) == 5


def time_to_minutes(value: str) -> int:
    """Convert HH:MM to minutes since midnight.

    Raises:
        ValueError: If the value is not a valid HH:MM time.
    """
    if not is_valid_time(value):
        raise ValueError(f"Invalid time of day: {value!r}")
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total_minutes: float) -> str:
    """Format minutes since midnight as HH:MM, wrapping past midnight."""
    wrapped = int(round(total_minutes)) % MINUTES_PER_DAY
    return f"{wrapped // 60:02d}:{wrapped % 60:02d}"


def today_iso() -> str:
    """Return today's local date as YYYY-MM-DD."""
    return date.today().strftime(DATE_FORMAT)


def default_report_range(today: str) -> tuple[str, str]:
    """One month back from ``today`` through ``today``, day clamped to month end."""
    current = datetime.strptime(today, DATE_FORMAT).date()
    year, month = (current.year - 1, 12) if current.month == 1 else (current.year, current.month - 1)
    day = min(current.day, calendar.monthrange(year, month)[1])
    return date(year, month, day).strftime(DATE_FORMAT), today


def now_millis() -> int:
    """Return the current epoch time in milliseconds."""
    return int(time.time() * 1000)


def format_hours(value: float) -> str:
    """Render a duration without a trailing .0 for whole hours.

    Examples:
        >>> format_hours(2.0)
        '2'
        >>> format_hours(1.5)
        '1.5'
    """
    return f"{value:g}"


def slugify(value: str) -> str:
    """Lower-case a name into an underscore-separated file-name slug.

    Examples:
        >>> slugify("S Cube Studioz")
        's_cube_studioz'
    """
    return re.sub(r"[^a-z0-9]+", "_", value.lower()).strip("_")
