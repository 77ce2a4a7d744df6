"""
Month calendar grid over the booking collection.

Weeks start on Sunday. Leading cells before the 1st are None; each day
cell carries its non-cancelled bookings so the grid can mark busy days,
while the selected-day listing shows every booking including cancelled
ones.
"""

import calendar
from dataclasses import dataclass, field
from typing import Iterable, Optional

from studiobook.engine.rules import bookings_on
from studiobook.schemas.booking_schema import Booking, BookingStatus

WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


@dataclass
class DayCell:
    """One day of the month grid."""
    day: int
    date: str
    is_today: bool = False
    is_selected: bool = False
    bookings: list[Booking] = field(default_factory=list)

    @property
    def has_bookings(self) -> bool:
        return bool(self.bookings)


@dataclass
class MonthView:
    year: int
    month: int
    cells: list[Optional[DayCell]]

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def weeks(self) -> list[list[Optional[DayCell]]]:
        """Cells chunked into rows of seven, last row padded with None."""
        padded = self.cells + [None] * (-len(self.cells) % 7)
        return [padded[i:i + 7] for i in range(0, len(padded), 7)]


def iso_day(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def first_weekday_sunday_based(year: int, month: int) -> int:
    """0 = Sunday ... 6 = Saturday for the first day of the month."""
    return (calendar.weekday(year, month, 1) + 1) % 7


def build_month_view(
    bookings: Iterable[Booking],
    year: int,
    month: int,
    today: str,
    selected: Optional[str] = None,
) -> MonthView:
    bookings = list(bookings)
    cells: list[Optional[DayCell]] = [None] * first_weekday_sunday_based(year, month)
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        day_str = iso_day(year, month, day)
        cells.append(DayCell(
            day=day,
            date=day_str,
            is_today=day_str == today,
            is_selected=day_str == selected,
            bookings=[
                b for b in bookings
                if b.date == day_str and b.status != BookingStatus.CANCELLED
            ],
        ))
    return MonthView(year=year, month=month, cells=cells)


def selected_day_bookings(bookings: Iterable[Booking], selected: str) -> list[Booking]:
    return bookings_on(bookings, selected)


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)
