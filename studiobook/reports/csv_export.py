"""CSV export of bookings within a date range."""

import csv
import logging
from io import StringIO
from typing import Iterable

from studiobook.engine.rules import filter_by_range
from studiobook.schemas.booking_schema import Booking
from studiobook.utils import format_hours

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Date",
    "Time",
    "Client Name",
    "Phone",
    "Type",
    "Duration (Hrs)",
    "Actual End Time",
    "Status",
]

NOT_AVAILABLE = "N/A"


def booking_to_row(booking: Booking) -> list[str]:
    return [
        booking.date,
        booking.start_time,
        booking.client_name,
        booking.phone_number or NOT_AVAILABLE,
        booking.type,
        format_hours(booking.duration_hours),
        booking.actual_end_time or NOT_AVAILABLE,
        booking.status.value,
    ]


def export_bookings_csv(bookings: Iterable[Booking], date_from: str, date_to: str) -> str:
    """Render the bookings dated within [date_from, date_to] as CSV text."""
    rows = filter_by_range(bookings, date_from, date_to)

    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for booking in rows:
        writer.writerow(booking_to_row(booking))

    logger.info("Exported %d bookings to CSV (%s to %s)", len(rows), date_from, date_to)
    return output.getvalue()


def report_filename(studio_slug: str, date_from: str, date_to: str, extension: str = "csv") -> str:
    return f"{studio_slug}_report_{date_from}_to_{date_to}.{extension}"
