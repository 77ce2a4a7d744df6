"""
Booking store, the single owner of the booking collection.

Each operation validates through the rules engine, replaces the affected
record with a new instance and then persists the whole collection
explicitly. A failed write is logged by the repository and leaves the
in-memory collection ahead of the persisted one until the next
successful save.
"""

import logging
import uuid
from typing import Callable, Optional

from pydantic import ValidationError

from studiobook.engine.draft import BookingDraft
from studiobook.engine.rules import find_conflicts
from studiobook.engine.state_machine import transition_status
from studiobook.exceptions import (
    BookingNotFoundError,
    BookingOverlapError,
    BookingValidationError,
)
from studiobook.schemas.booking_schema import Booking, BookingStatus, InvoiceDetails
from studiobook.store.persistence import BookingRepository
from studiobook.utils import now_millis

logger = logging.getLogger(__name__)


def _new_booking_id() -> str:
    return str(uuid.uuid4())


class BookingStore:
    """In-memory ordered booking collection backed by a repository."""

    def __init__(
        self,
        repository: BookingRepository,
        id_factory: Callable[[], str] = _new_booking_id,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._repository = repository
        self._id_factory = id_factory
        self._clock = clock
        self._bookings: list[Booking] = []

    @property
    def bookings(self) -> tuple[Booking, ...]:
        """Immutable snapshot of the collection in insertion order."""
        return tuple(self._bookings)

    def load(self) -> "BookingStore":
        """Rehydrate from persisted state (empty if nothing usable is stored)."""
        self._bookings = self._repository.load()
        logger.info("Booking store loaded with %d bookings", len(self._bookings))
        return self

    def get(self, booking_id: str) -> Booking:
        for booking in self._bookings:
            if booking.id == booking_id:
                return booking
        raise BookingNotFoundError(f"Booking {booking_id} not found.")

    def find(self, id_prefix: str) -> Booking:
        """Look a booking up by full id or unique id prefix (as printed on invoices)."""
        prefix = id_prefix.strip().lower()
        matches = [b for b in self._bookings if prefix and b.id.lower().startswith(prefix)]
        if not matches:
            raise BookingNotFoundError(f"Booking {id_prefix} not found.")
        if len(matches) > 1:
            raise BookingNotFoundError(
                f"Booking reference {id_prefix} is ambiguous ({len(matches)} matches)."
            )
        return matches[0]

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def create(self, draft: BookingDraft) -> Booking:
        """
        Create a CONFIRMED booking from a validated draft.

        Raises:
            BookingValidationError: Missing or malformed required fields.
            BookingOverlapError: The slot clashes with a non-cancelled booking.
        """
        draft.validate()
        try:
            booking = Booking(
                id=self._id_factory(),
                client_name=draft.client_name,
                phone_number=draft.phone_number or "",
                date=draft.date,
                start_time=draft.start_time,
                duration_hours=draft.duration_hours,
                type=draft.type,
                status=BookingStatus.CONFIRMED,
                created_at=self._clock(),
                notes=draft.notes or None,
            )
        except ValidationError as e:
            fields = [str(err["loc"][0]) for err in e.errors() if err["loc"]]
            raise BookingValidationError(f"Invalid booking: {e}", fields=fields) from e

        # overlap is checked on the canonical record, not the raw draft values
        conflicts = find_conflicts(booking, self._bookings)
        if conflicts:
            clash = conflicts[0]
            raise BookingOverlapError(
                f"Overlap detected! {booking.date} {booking.start_time} clashes with "
                f"{clash.client_name}'s {clash.type} session at {clash.start_time}.",
                conflicts=conflicts,
            )

        if any(b.id == booking.id for b in self._bookings):
            raise BookingValidationError(f"Duplicate booking id {booking.id}", fields=["id"])

        self._bookings = [*self._bookings, booking]
        logger.info(
            "Booking created: %s for %s on %s at %s",
            booking.id, booking.client_name, booking.date, booking.start_time,
        )
        self._persist()
        return booking

    def update_status(
        self,
        booking_id: str,
        status: BookingStatus,
        actual_end_time: Optional[str] = None,
    ) -> Booking:
        """Move a booking along its lifecycle (see ``transition_status``)."""
        updated = transition_status(self.get(booking_id), status, actual_end_time)
        self._replace(updated)
        logger.info("Booking %s is now %s", booking_id, updated.status.value)
        return updated

    def cancel(self, booking_id: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.CANCELLED)

    def complete(self, booking_id: str, actual_end_time: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.COMPLETED, actual_end_time)

    def update_invoice(self, booking_id: str, rate_per_hour: float) -> Booking:
        """
        Attach (or replace) the invoice snapshot of a completed booking.

        Raises:
            BookingValidationError: Booking not completed, or negative rate.
        """
        booking = self.get(booking_id)
        if booking.status != BookingStatus.COMPLETED:
            raise BookingValidationError(
                f"Invoices can only be generated for completed sessions "
                f"(booking {booking_id} is {booking.status.value}).",
                fields=["status"],
            )
        if rate_per_hour < 0:
            raise BookingValidationError(
                f"Hourly rate must be >= 0, got {rate_per_hour}", fields=["ratePerHour"]
            )

        invoice = InvoiceDetails(
            rate_per_hour=rate_per_hour,
            total_amount=rate_per_hour * booking.duration_hours,
            generated_at=self._clock(),
        )
        updated = booking.model_copy(update={"invoice_details": invoice})
        self._replace(updated)
        logger.info("Invoice recorded for %s: %.2f", booking_id, invoice.total_amount)
        return updated

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _replace(self, updated: Booking) -> None:
        self._bookings = [updated if b.id == updated.id else b for b in self._bookings]
        self._persist()

    def _persist(self) -> None:
        self._repository.save(self._bookings)
