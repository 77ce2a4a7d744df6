"""
Finite state machine for the booking status lifecycle.

A booking starts CONFIRMED and can move exactly once, either to COMPLETED
(which stamps the actual end time) or to CANCELLED. Both are terminal:
there is no path back, so a cancelled booking can never be resurrected.

Usage:
    completed = transition_status(booking, BookingStatus.COMPLETED, "13:30")
    assert completed.status == BookingStatus.COMPLETED
"""

import logging
from dataclasses import dataclass
from typing import Optional

from studiobook.exceptions import BookingValidationError, InvalidTransitionError
from studiobook.schemas.booking_schema import Booking, BookingStatus
from studiobook.utils import is_valid_time, minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    requires_end_time: bool = False


TRANSITIONS: list[Transition] = [
    Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, requires_end_time=True),
    Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
]

TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


def get_valid_targets(status: BookingStatus) -> list[BookingStatus]:
    """Return every status reachable in one step from ``status``."""
    return [t.to_status for t in TRANSITIONS if t.from_status == status]


def is_terminal(status: BookingStatus) -> bool:
    """Check if no further transition is possible from ``status``."""
    return status in TERMINAL_STATUSES


def _find_transition(from_status: BookingStatus, to_status: BookingStatus) -> Optional[Transition]:
    for t in TRANSITIONS:
        if t.from_status == from_status and t.to_status == to_status:
            return t
    return None


def transition_status(
    booking: Booking,
    new_status: BookingStatus,
    actual_end_time: Optional[str] = None,
) -> Booking:
    """
    Apply a status change and return the updated booking.

    Args:
        booking: The current record. It is not modified.
        new_status: The requested status.
        actual_end_time: HH:MM the session really ended. Required for
            completion and stored exactly as given; ignored otherwise.

    Returns:
        A new Booking with only ``status`` (and ``actual_end_time`` on
        completion) changed.

    Raises:
        InvalidTransitionError: If the transition is not allowed.
        BookingValidationError: If completion lacks a valid end time.
    """
    try:
        new_status = BookingStatus(new_status)
    except ValueError:
        raise InvalidTransitionError(
            f"Unknown booking status {new_status!r}. "
            f"Known statuses: {[s.value for s in BookingStatus]}"
        ) from None
    transition = _find_transition(booking.status, new_status)
    if transition is None:
        valid = [s.value for s in get_valid_targets(booking.status)]
        raise InvalidTransitionError(
            f"Cannot change booking {booking.id} from '{booking.status.value}' "
            f"to '{new_status.value}'. Valid targets: {valid}"
        )

    update: dict = {"status": new_status}
    if transition.requires_end_time:
        if not actual_end_time or not is_valid_time(actual_end_time):
            raise BookingValidationError(
                f"Completing a session needs an actual end time in HH:MM, got {actual_end_time!r}",
                fields=["actualEndTime"],
            )
        update["actual_end_time"] = actual_end_time.strip()

    logger.debug(
        "Status transition for %s: %s -> %s",
        booking.id, booking.status.value, new_status.value,
    )
    return booking.model_copy(update=update)


def default_end_time(booking: Booking) -> str:
    """Propose start time plus booked duration as the completion time."""
    end = time_to_minutes(booking.start_time) + booking.duration_hours * 60
    return minutes_to_time(end)
