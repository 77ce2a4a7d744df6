"""Booking, invoice and statistics data models."""

from enum import Enum
import math
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from studiobook.utils import is_valid_date, is_valid_time


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class InvoiceDetails(BaseModel):
    """Billing snapshot attached to a completed booking."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rate_per_hour: float = Field(alias="ratePerHour", ge=0)
    total_amount: float = Field(alias="totalAmount", ge=0)
    generated_at: int = Field(alias="generatedAt")


class Booking(BaseModel):
    """
    A scheduled studio session.

    Records are immutable: every change produces a new instance via
    ``model_copy(update=...)`` so holders of an older snapshot never see
    it change underneath them. Field aliases are the persisted camelCase keys.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    client_name: str = Field(alias="clientName", min_length=1)
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    date: str
    start_time: str = Field(alias="startTime")
    duration_hours: float = Field(alias="durationHours", gt=0, allow_inf_nan=False)
    actual_end_time: Optional[str] = Field(default=None, alias="actualEndTime")
    type: str
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: int = Field(alias="createdAt")
    notes: Optional[str] = None
    invoice_details: Optional[InvoiceDetails] = Field(default=None, alias="invoiceDetails")

    @field_validator("client_name")
    @classmethod
    def _client_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("clientName must not be blank")
        return value

    @field_validator("date")
    @classmethod
    def _date_format(cls, value: str) -> str:
        if not is_valid_date(value):
            raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
        return value.strip()

    @field_validator("start_time", "actual_end_time")
    @classmethod
    def _time_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_time(value):
            raise ValueError(f"time must be HH:MM, got {value!r}")
        return value.strip() if value is not None else None

    def to_record(self) -> dict:
        """Serialize to the persisted camelCase dict, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BookingStats(BaseModel):
    """Aggregate statistics over a date range."""

    total_bookings: int = 0
    completed_bookings: int = 0
    cancelled_bookings: int = 0
    total_hours: float = 0.0


class ProposedBooking(BaseModel):
    """
    Best-effort partial booking returned by the AI extraction service.

    Every field is optional and nothing here is trusted: a proposal is only
    ever merged into a ``BookingDraft``, which re-validates each value.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    client_name: Optional[str] = Field(default=None, alias="clientName")
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    date: Optional[str] = None
    start_time: Optional[str] = Field(default=None, alias="startTime")
    # unparseable durations are kept as given so the draft can reject them
    duration_hours: Optional[Union[float, str]] = Field(default=None, alias="durationHours")
    type: Optional[str] = None

    @field_validator("client_name", "phone_number", "date", "start_time", "type", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        if isinstance(value, bool):
            return None
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, (int, float)):
            return str(value)
        return value if isinstance(value, str) else None

    @field_validator("duration_hours", mode="before")
    @classmethod
    def _coerce_duration(cls, value: Any) -> Union[float, str, None]:
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if not isinstance(value, str):
            return None
        try:
            number = float(value)
        except ValueError:
            return value
        return number if math.isfinite(number) else value

    def is_empty(self) -> bool:
        """True when the extraction produced no usable field at all."""
        return all(
            value in (None, "")
            for value in self.model_dump().values()
        )
