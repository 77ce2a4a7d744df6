"""Studio booking manager: bookings, rules engine, reports and AI-assisted booking."""

__version__ = "1.0.0"
