from studiobook.engine.draft import BookingDraft
from studiobook.engine.rules import (
    aggregate_stats,
    find_conflicts,
    has_overlap,
    todays_and_upcoming,
)
from studiobook.engine.state_machine import transition_status

__all__ = [
    "BookingDraft",
    "aggregate_stats",
    "find_conflicts",
    "has_overlap",
    "todays_and_upcoming",
    "transition_status",
]
