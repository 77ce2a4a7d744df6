"""
Pure booking rules: overlap detection, range filtering and statistics.

Nothing here mutates its inputs or keeps hidden state, so every function
returns the same answer for the same collection.

Dates are fixed-width YYYY-MM-DD and times fixed-width HH:MM, so plain
string comparison orders them correctly.
"""

import logging
from typing import Iterable, Optional, Protocol, Sequence

from studiobook.schemas.booking_schema import Booking, BookingStats, BookingStatus
from studiobook.utils import time_to_minutes

logger = logging.getLogger(__name__)


class Schedulable(Protocol):
    """Anything carrying the three fields an overlap check needs."""

    date: Optional[str]
    start_time: Optional[str]
    duration_hours: Optional[float]


def _interval(start_time: str, duration_hours: float) -> tuple[float, float]:
    start = time_to_minutes(start_time)
    return start, start + float(duration_hours) * 60


def find_conflicts(candidate: Schedulable, existing: Iterable[Booking]) -> list[Booking]:
    """
    Return the non-cancelled bookings whose interval intersects the candidate's.

    Intervals are half-open: a session ending at 12:00 does not clash with
    one starting at 12:00. A session running past midnight is not carried
    over into the next day.
    """
    if not candidate.date or not candidate.start_time or not candidate.duration_hours:
        return []

    c_start, c_end = _interval(candidate.start_time, candidate.duration_hours)
    conflicts = []
    for booking in existing:
        if booking.status == BookingStatus.CANCELLED:
            continue
        if booking.date != candidate.date:
            continue
        b_start, b_end = _interval(booking.start_time, booking.duration_hours)
        if c_start < b_end and c_end > b_start:
            conflicts.append(booking)
    return conflicts


def has_overlap(candidate: Schedulable, existing: Iterable[Booking]) -> bool:
    """Check whether the candidate collides with any existing booking."""
    return bool(find_conflicts(candidate, existing))


def filter_by_range(bookings: Iterable[Booking], date_from: str, date_to: str) -> list[Booking]:
    """Bookings dated within [date_from, date_to], inclusive, in collection order."""
    return [b for b in bookings if date_from <= b.date <= date_to]


def aggregate_stats(bookings: Iterable[Booking], date_from: str, date_to: str) -> BookingStats:
    """Count bookings by status and sum booked hours over a date range.

    Cancelled sessions count towards ``total_bookings`` and
    ``cancelled_bookings`` but not towards ``total_hours``.
    """
    in_range = filter_by_range(bookings, date_from, date_to)
    return BookingStats(
        total_bookings=len(in_range),
        completed_bookings=sum(1 for b in in_range if b.status == BookingStatus.COMPLETED),
        cancelled_bookings=sum(1 for b in in_range if b.status == BookingStatus.CANCELLED),
        total_hours=sum(
            b.duration_hours for b in in_range if b.status != BookingStatus.CANCELLED
        ),
    )


def session_type_breakdown(bookings: Iterable[Booking]) -> dict[str, int]:
    """Count non-cancelled bookings per session type, in first-seen order."""
    counts: dict[str, int] = {}
    for b in bookings:
        if b.status == BookingStatus.CANCELLED:
            continue
        counts[b.type] = counts.get(b.type, 0) + 1
    return counts


def bookings_on(bookings: Iterable[Booking], day: str) -> list[Booking]:
    """All bookings on one date, cancelled included, ordered by start time."""
    return sorted((b for b in bookings if b.date == day), key=lambda b: b.start_time)


def todays_bookings(bookings: Iterable[Booking], today: str) -> list[Booking]:
    """Today's bookings ordered by start time."""
    return bookings_on(bookings, today)


def upcoming_bookings(bookings: Iterable[Booking], today: str) -> list[Booking]:
    """Bookings dated today or later, ordered by date then start time.

    The full ordered sequence is returned; excluding today and capping the
    length is left to the caller.
    """
    return sorted(
        (b for b in bookings if b.date >= today),
        key=lambda b: b.date + b.start_time,
    )


def todays_and_upcoming(
    bookings: Sequence[Booking], today: str
) -> tuple[list[Booking], list[Booking]]:
    """Return ``(todays_bookings, upcoming_bookings)`` for the dashboard."""
    return todays_bookings(bookings, today), upcoming_bookings(bookings, today)
