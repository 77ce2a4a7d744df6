from typing import Sequence


class BookingError(Exception):
    """Base class for booking operations rejected before any mutation."""


class BookingValidationError(BookingError):
    """Raised when a booking is missing required fields or has malformed values."""

    def __init__(self, message: str, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.fields = list(fields)


class BookingOverlapError(BookingError):
    """Raised when a new booking intersects an existing non-cancelled booking."""

    def __init__(self, message: str, conflicts: Sequence = ()) -> None:
        super().__init__(message)
        self.conflicts = list(conflicts)


class BookingNotFoundError(BookingError, KeyError):
    """Raised when no booking has the requested identifier."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Booking not found"


class InvalidTransitionError(BookingError):
    """Raised when a status change is not allowed from the current status."""


class LLMUpstreamError(RuntimeError):
    """Raised when the AI provider fails (timeouts, network errors, service unavailable)."""


class LLMContractError(RuntimeError):
    """Raised when the AI provider returns a response of the wrong shape or format."""
