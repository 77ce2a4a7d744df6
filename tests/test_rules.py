"""Tests for overlap detection, statistics and dashboard ordering."""

from studiobook.engine.rules import (
    aggregate_stats,
    filter_by_range,
    find_conflicts,
    has_overlap,
    session_type_breakdown,
    todays_and_upcoming,
    upcoming_bookings,
)
from studiobook.schemas.booking_schema import BookingStatus
from tests.conftest import make_booking, make_draft


class TestOverlap:
    def test_overlapping_interval_conflicts(self):
        existing = [make_booking(start_time="10:00", duration_hours=2)]
        candidate = make_draft(start_time="11:00", duration_hours=1)
        assert [b.id for b in find_conflicts(candidate, existing)] == ["b-001"]

    def test_touching_endpoints_do_not_conflict(self):
        existing = [make_booking(start_time="10:00", duration_hours=2)]
        assert not has_overlap(make_draft(start_time="12:00", duration_hours=1), existing)
        assert not has_overlap(make_draft(start_time="08:00", duration_hours=2), existing)

    def test_enclosing_interval_conflicts(self):
        existing = [make_booking(start_time="11:00", duration_hours=0.5)]
        assert has_overlap(make_draft(start_time="10:00", duration_hours=4), existing)

    def test_cancelled_booking_never_blocks(self):
        existing = [make_booking(status=BookingStatus.CANCELLED)]
        assert not has_overlap(make_draft(), existing)

    def test_completed_booking_still_blocks(self):
        existing = [make_booking(status=BookingStatus.COMPLETED, actual_end_time="12:00")]
        assert has_overlap(make_draft(), existing)

    def test_other_date_never_conflicts(self):
        existing = [make_booking(date="2024-06-02")]
        assert not has_overlap(make_draft(date="2024-06-01"), existing)

    def test_fractional_durations(self):
        existing = [make_booking(start_time="10:00", duration_hours=1.5)]
        assert has_overlap(make_draft(start_time="11:15", duration_hours=1), existing)
        assert not has_overlap(make_draft(start_time="11:30", duration_hours=1), existing)

    def test_incomplete_candidate_has_no_conflicts(self):
        existing = [make_booking()]
        assert find_conflicts(make_draft(start_time=None), existing) == []

    def test_session_past_midnight_does_not_wrap(self):
        existing = [make_booking(date="2024-06-02", start_time="00:00", duration_hours=1)]
        assert not has_overlap(make_draft(date="2024-06-01", start_time="23:00", duration_hours=3), existing)

    def test_all_conflicts_returned(self):
        existing = [
            make_booking("b-001", start_time="09:00", duration_hours=2),
            make_booking("b-002", start_time="12:00", duration_hours=1),
            make_booking("b-003", start_time="15:00", duration_hours=1),
        ]
        conflicts = find_conflicts(make_draft(start_time="10:00", duration_hours=3), existing)
        assert [b.id for b in conflicts] == ["b-001", "b-002"]


class TestAggregateStats:
    def _mixed(self):
        return [
            make_booking("b-001", date="2024-06-01", duration_hours=3,
                         status=BookingStatus.COMPLETED, actual_end_time="13:00"),
            make_booking("b-002", date="2024-06-02", duration_hours=2,
                         status=BookingStatus.CANCELLED),
            make_booking("b-003", date="2024-06-03", duration_hours=1),
        ]

    def test_mixed_statuses(self):
        stats = aggregate_stats(self._mixed(), "2024-06-01", "2024-06-30")
        assert stats.total_bookings == 3
        assert stats.completed_bookings == 1
        assert stats.cancelled_bookings == 1
        assert stats.total_hours == 4

    def test_range_is_inclusive(self):
        stats = aggregate_stats(self._mixed(), "2024-06-01", "2024-06-01")
        assert stats.total_bookings == 1
        assert stats.total_hours == 3

    def test_empty_range(self):
        stats = aggregate_stats(self._mixed(), "2025-01-01", "2025-01-31")
        assert stats.total_bookings == 0
        assert stats.total_hours == 0

    def test_repeatable_and_does_not_mutate(self):
        bookings = self._mixed()
        before = [b.model_dump() for b in bookings]
        first = aggregate_stats(bookings, "2024-06-01", "2024-06-30")
        second = aggregate_stats(bookings, "2024-06-01", "2024-06-30")
        assert first == second
        assert [b.model_dump() for b in bookings] == before

    def test_filter_by_range_keeps_collection_order(self):
        bookings = list(reversed(self._mixed()))
        assert [b.id for b in filter_by_range(bookings, "2024-06-02", "2024-06-03")] == [
            "b-003", "b-002",
        ]


class TestBreakdown:
    def test_counts_non_cancelled_by_type(self):
        bookings = [
            make_booking("b-001", type="Vocal Recording"),
            make_booking("b-002", type="Dubbing"),
            make_booking("b-003", type="Vocal Recording"),
            make_booking("b-004", type="Podcast", status=BookingStatus.CANCELLED),
        ]
        assert session_type_breakdown(bookings) == {"Vocal Recording": 2, "Dubbing": 1}


class TestTodayAndUpcoming:
    def test_ordering(self):
        bookings = [
            make_booking("late", date="2024-06-03", start_time="09:00"),
            make_booking("past", date="2024-05-30", start_time="09:00"),
            make_booking("today-pm", date="2024-06-01", start_time="15:00"),
            make_booking("today-am", date="2024-06-01", start_time="09:00"),
            make_booking("soon", date="2024-06-02", start_time="18:00"),
        ]
        todays, upcoming = todays_and_upcoming(bookings, "2024-06-01")
        assert [b.id for b in todays] == ["today-am", "today-pm"]
        assert [b.id for b in upcoming] == ["today-am", "today-pm", "soon", "late"]

    def test_upcoming_excludes_past(self):
        bookings = [make_booking(date="2024-05-31")]
        assert upcoming_bookings(bookings, "2024-06-01") == []

    def test_today_includes_cancelled(self):
        bookings = [make_booking(status=BookingStatus.CANCELLED)]
        todays, _ = todays_and_upcoming(bookings, "2024-06-01")
        assert len(todays) == 1
