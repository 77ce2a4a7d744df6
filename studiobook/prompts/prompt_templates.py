"""Dynamic prompt construction for date-aware AI requests."""

import json
from typing import Iterable, Optional

from studiobook.schemas.booking_schema import Booking


def build_extraction_prompt(text: str, today: str) -> str:
    """Build the user prompt for extracting booking fields from free text."""
    return (
        "Extract booking details from the following text.\n"
        f"Current Date: {today}.\n"
        f"Assume the year is {today[:4]} unless specified.\n"
        'If the user says "tomorrow" or "next friday", calculate the specific '
        "date YYYY-MM-DD from the current date.\n"
        'If a time is mentioned like "evening 6", convert it to 18:00.\n'
        f'Text: "{text}"'
    )


def build_booking_context(bookings: Iterable[Booking]) -> str:
    """Serialize the booking collection as compact JSON context for the assistant."""
    return json.dumps(
        [
            {
                "name": b.client_name,
                "date": b.date,
                "time": b.start_time,
                "duration": b.duration_hours,
                "type": b.type,
                "status": b.status.value,
                "phone": b.phone_number,
            }
            for b in bookings
        ],
        ensure_ascii=False,
    )


def build_assistant_prompt(question: str, bookings: Iterable[Booking], today: str) -> str:
    """Build the user prompt carrying the database and the question."""
    return (
        f"Current Date: {today}.\n\n"
        "Here is the complete database of bookings:\n"
        f"{build_booking_context(bookings)}\n\n"
        f"User Question: {question}"
    )


def build_summary_prompt(bookings: Iterable[Booking]) -> Optional[str]:
    """One line per booking, or None when there is nothing to summarize."""
    lines = [
        f"{b.date} at {b.start_time}: {b.type} session with {b.client_name} ({b.status.value})"
        for b in bookings
    ]
    if not lines:
        return None
    return "\n".join(lines)
