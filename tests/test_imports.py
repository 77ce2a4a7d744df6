"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_booking_schema(self):
        from studiobook.schemas.booking_schema import Booking, BookingStatus, ProposedBooking
        assert BookingStatus.CONFIRMED == "CONFIRMED"
        assert ProposedBooking().is_empty()
        assert Booking is not None


class TestEngineImports:
    def test_engine_reexports(self):
        from studiobook.engine import (
            BookingDraft, aggregate_stats, find_conflicts, has_overlap,
            todays_and_upcoming, transition_status,
        )
        assert BookingDraft().missing_fields()
        assert callable(aggregate_stats)
        assert callable(find_conflicts)
        assert callable(has_overlap)
        assert callable(todays_and_upcoming)
        assert callable(transition_status)


class TestStoreImports:
    def test_store_reexports(self):
        from studiobook.store import (
            BookingRepository, BookingStore, InMemoryKeyValueStore,
            JsonFileKeyValueStore, KeyValueStore, StorageError,
        )
        store = BookingStore(BookingRepository(InMemoryKeyValueStore(), "k"))
        assert store.bookings == ()
        assert issubclass(JsonFileKeyValueStore, KeyValueStore)
        assert issubclass(StorageError, RuntimeError)


class TestAiImports:
    def test_ai_reexports(self):
        from studiobook.ai import (
            StudioLLMClient, ask_studio_assistant, generate_session_summary,
            parse_booking_request, parse_voice_booking_request,
        )
        assert StudioLLMClient(client=object()).client is not None
        assert callable(ask_studio_assistant)
        assert callable(generate_session_summary)
        assert callable(parse_booking_request)
        assert callable(parse_voice_booking_request)


class TestReportImports:
    def test_reports_reexports(self):
        from studiobook.reports import (
            build_invoice_pdf, build_report_pdf, export_bookings_csv,
            invoice_filename, report_filename, whatsapp_share_url,
        )
        assert callable(build_invoice_pdf)
        assert callable(build_report_pdf)
        assert callable(export_bookings_csv)
        assert callable(invoice_filename)
        assert callable(report_filename)
        assert callable(whatsapp_share_url)


class TestPromptImports:
    def test_system_prompts_not_empty(self):
        from studiobook.prompts.system_prompts import (
            ASSISTANT_SYSTEM_PROMPT, EXTRACTION_SYSTEM_PROMPT, SUMMARY_SYSTEM_PROMPT,
        )
        assert "clientName" in EXTRACTION_SYSTEM_PROMPT
        assert ASSISTANT_SYSTEM_PROMPT
        assert SUMMARY_SYSTEM_PROMPT


class TestEntryPoint:
    def test_console_parser_builds(self):
        from studiobook.console import build_parser
        args = build_parser().parse_args(["list", "--status", "COMPLETED"])
        assert args.status == "COMPLETED"
