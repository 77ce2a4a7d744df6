"""Request ID logging context for tracing AI requests across modules.

Every call to the generative-AI service gets a short request ID so the
log lines of one fill / ask / summary round trip can be correlated, even
when a newer request overtakes an older one.

Usage:
    from studiobook.logging_context import get_request_logger, new_request_id

    new_request_id("fill")
    logger = get_request_logger(__name__)
    logger.info("Extracting booking")  # → [fill-3f9a2c] Extracting booking
"""

import logging
import uuid
from contextvars import ContextVar

NO_REQUEST_ID = "-"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _request_id.set(request_id)


def new_request_id(prefix: str) -> str:
    """Generate, set and return a fresh correlation ID."""
    request_id = f"{prefix}-{uuid.uuid4().hex[:6]}"
    _request_id.set(request_id)
    return request_id


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
