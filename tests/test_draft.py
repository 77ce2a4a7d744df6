"""Tests for booking draft validation and AI proposal merging."""

import pytest

from studiobook.config import settings
from studiobook.engine.draft import BookingDraft
from studiobook.exceptions import BookingValidationError
from studiobook.schemas.booking_schema import ProposedBooking
from tests.conftest import make_draft


class TestDefaults:
    def test_form_defaults(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        assert draft.date == "2024-06-01"
        assert draft.start_time == settings.studio.default_start_time
        assert draft.duration_hours == settings.studio.default_duration_hours
        assert draft.type == settings.studio.default_session_type

    def test_only_client_name_missing(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        assert draft.missing_fields() == ["clientName"]


class TestSetField:
    def test_valid_name(self):
        draft = BookingDraft()
        ok, msg = draft.set_field("client_name", "  Priya  ")
        assert ok
        assert draft.client_name == "Priya"
        assert "Priya" in msg

    def test_invalid_date_keeps_previous_value(self):
        draft = BookingDraft(date="2024-06-01")
        ok, msg = draft.set_field("date", "next friday")
        assert not ok
        assert draft.date == "2024-06-01"
        assert draft.rejected["date"] == "next friday"
        assert "doesn't look right" in msg

    def test_successful_set_clears_rejection(self):
        draft = BookingDraft()
        draft.set_field("start_time", "6pm")
        draft.set_field("start_time", "18:00")
        assert "start_time" not in draft.rejected

    def test_duration_coerced_to_float(self):
        draft = BookingDraft()
        ok, _ = draft.set_field("duration_hours", "1.5")
        assert ok
        assert draft.duration_hours == 1.5

    @pytest.mark.parametrize("value", [0, -1, "two", "inf", float("nan")])
    def test_invalid_duration(self, value):
        ok, _ = BookingDraft().set_field("duration_hours", value)
        assert not ok

    def test_phone_normalized(self):
        draft = BookingDraft()
        draft.set_field("phone_number", "+91 98401-23456")
        assert draft.phone_number == "+919840123456"

    def test_session_type_alias(self):
        draft = BookingDraft()
        draft.set_field("type", "vocals")
        assert draft.type == "Vocal Recording"

    def test_unknown_session_type_kept(self):
        draft = BookingDraft()
        draft.set_field("type", " Drum Tracking ")
        assert draft.type == "Drum Tracking"

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown draft field"):
            BookingDraft().set_field("venue", "Room A")


class TestApplyProposal:
    def test_merges_valid_fields(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        proposal = ProposedBooking(clientName="Priya", date="2024-06-02", startTime="18:00")
        assert draft.apply_proposal(proposal) == []
        assert draft.client_name == "Priya"
        assert draft.date == "2024-06-02"
        assert draft.start_time == "18:00"

    def test_missing_fields_fall_back_to_defaults(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        draft.apply_proposal(ProposedBooking(clientName="Priya"))
        assert draft.type == settings.studio.default_session_type
        assert draft.duration_hours == settings.studio.default_duration_hours

    def test_invalid_proposed_values_skipped(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        proposal = ProposedBooking(clientName="Priya", date="tomorrow", startTime="25:00")
        failed = draft.apply_proposal(proposal)
        assert sorted(failed) == ["date", "start_time"]
        assert draft.date == "2024-06-01"
        assert draft.start_time == settings.studio.default_start_time

    def test_unparseable_duration_rejected_alone(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        proposal = ProposedBooking.model_validate(
            {"clientName": "Priya", "date": "2024-06-02", "durationHours": "2 hours"}
        )
        assert draft.apply_proposal(proposal) == ["duration_hours"]
        assert draft.rejected["duration_hours"] == "2 hours"
        assert draft.client_name == "Priya"
        assert draft.date == "2024-06-02"
        assert draft.duration_hours == settings.studio.default_duration_hours

    def test_free_text_type_containing_alias_kept(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        draft.apply_proposal(ProposedBooking(type="Remix stems"))
        assert draft.type == "Remix stems"

    def test_empty_strings_ignored(self):
        draft = BookingDraft.with_defaults("2024-06-01")
        draft.apply_proposal(ProposedBooking(clientName="Priya", type=""))
        assert draft.type == settings.studio.default_session_type


class TestValidate:
    def test_complete_draft_passes(self):
        make_draft().validate()

    def test_missing_required_fields(self):
        draft = make_draft(client_name="", start_time=None)
        with pytest.raises(BookingValidationError) as exc:
            draft.validate()
        assert exc.value.fields == ["clientName", "startTime"]

    def test_phone_and_notes_optional(self):
        make_draft(phone_number=None, notes=None).validate()
