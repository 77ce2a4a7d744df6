"""
Booking draft: the editable form state of a booking that does not exist yet.

Manual entry and AI extraction share one path. Every value, whoever
proposed it, goes through the same per-field validator before it lands in
the draft, and the store refuses to create a booking from a draft with
missing or invalid required fields.

Usage:
    draft = BookingDraft.with_defaults(today="2024-06-01")
    ok, msg = draft.set_field("client_name", "arun kumar")
    rejected = draft.apply_proposal(proposal)
    if not draft.missing_fields():
        store.create(draft)
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from studiobook.config import settings
from studiobook.exceptions import BookingValidationError
from studiobook.schemas.booking_schema import ProposedBooking
from studiobook.tools.session_types import normalize_session_type
from studiobook.utils import is_valid_date, is_valid_time, normalize_phone, today_iso

logger = logging.getLogger(__name__)


def _validate_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _validate_phone(value: Any) -> bool:
    # no format rules for phone numbers
    return isinstance(value, str)


def _validate_date(value: Any) -> bool:
    return isinstance(value, str) and is_valid_date(value)


def _validate_time(value: Any) -> bool:
    return isinstance(value, str) and is_valid_time(value)


def _validate_duration(value: Any) -> bool:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0


def _validate_type(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


@dataclass(frozen=True)
class FieldDefinition:
    """Schema for a single draft field."""

    name: str
    display_name: str
    alias: str
    required: bool = True
    validator: Optional[Callable[[Any], bool]] = None


FIELD_DEFINITIONS: list[FieldDefinition] = [
    FieldDefinition("client_name", "client name", "clientName", validator=_validate_name),
    FieldDefinition("phone_number", "phone number", "phoneNumber", required=False,
                    validator=_validate_phone),
    FieldDefinition("date", "date", "date", validator=_validate_date),
    FieldDefinition("start_time", "start time", "startTime", validator=_validate_time),
    FieldDefinition("duration_hours", "duration", "durationHours", validator=_validate_duration),
    FieldDefinition("type", "session type", "type", validator=_validate_type),
    FieldDefinition("notes", "notes", "notes", required=False),
]

_DEFINITIONS_BY_NAME = {d.name: d for d in FIELD_DEFINITIONS}


@dataclass
class BookingDraft:
    """Form state for a new booking, pre-filled with studio defaults."""

    client_name: Optional[str] = None
    phone_number: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    duration_hours: Optional[float] = None
    type: Optional[str] = None
    notes: Optional[str] = None
    rejected: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def with_defaults(cls, today: Optional[str] = None) -> "BookingDraft":
        """A blank form as the booking dialog opens it."""
        studio = settings.studio
        return cls(
            client_name="",
            phone_number="",
            date=today or today_iso(),
            start_time=studio.default_start_time,
            duration_hours=studio.default_duration_hours,
            type=studio.default_session_type,
        )

    @staticmethod
    def _get_definition(name: str) -> FieldDefinition:
        try:
            return _DEFINITIONS_BY_NAME[name]
        except KeyError:
            raise ValueError(f"Unknown draft field: {name}") from None

    @staticmethod
    def _normalize(name: str, value: Any) -> Any:
        """Apply field-specific normalization rules."""
        if name == "duration_hours":
            return float(value)
        if not isinstance(value, str):
            return value
        value = value.strip()
        if name == "phone_number":
            return normalize_phone(value)
        if name == "type":
            return normalize_session_type(value)
        return value

    def set_field(self, name: str, value: Any) -> tuple[bool, str]:
        """
        Set a field with validation.

        Returns:
            (success, message). On failure the previous value is kept and
            the offending value is remembered in ``rejected``.
        """
        defn = self._get_definition(name)
        if defn.validator and not defn.validator(value):
            self.rejected[name] = value
            logger.debug("Draft field '%s' rejected: %r", name, value)
            return False, f"The {defn.display_name} '{value}' doesn't look right."

        normalized = self._normalize(name, value)
        setattr(self, name, normalized)
        self.rejected.pop(name, None)
        return True, f"Got {defn.display_name}: {normalized}"

    def apply_proposal(self, proposal: ProposedBooking) -> list[str]:
        """
        Merge an AI-extracted proposal into the draft.

        Fields the proposal leaves empty keep their current value, which
        is how a missing session type or duration falls back to the form
        default. Invalid proposed values are skipped.

        Returns:
            Names of proposed fields that failed validation.
        """
        failed = []
        for name, value in proposal.model_dump().items():
            if value is None or value == "":
                continue
            ok, _ = self.set_field(name, value)
            if not ok:
                failed.append(name)
        if failed:
            logger.info("Ignored invalid proposed fields: %s", ", ".join(failed))
        return failed

    def missing_fields(self) -> list[str]:
        """Required fields that are empty or invalid, by persisted name."""
        missing = []
        for defn in FIELD_DEFINITIONS:
            if not defn.required:
                continue
            value = getattr(self, defn.name)
            if value is None or value == "" or (defn.validator and not defn.validator(value)):
                missing.append(defn.alias)
        return missing

    def validate(self) -> None:
        """Raise ``BookingValidationError`` unless the draft can become a booking."""
        missing = self.missing_fields()
        if missing:
            raise BookingValidationError(
                "Please fill in all required fields: " + ", ".join(missing),
                fields=missing,
            )

    def to_dict(self) -> dict[str, Any]:
        """Export filled values keyed by python field name."""
        return {
            d.name: getattr(self, d.name)
            for d in FIELD_DEFINITIONS
            if getattr(self, d.name) not in (None, "")
        }
