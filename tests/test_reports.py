"""Tests for CSV export, invoice and report PDFs, and the WhatsApp share link."""

import csv
from datetime import date
from io import StringIO
from urllib.parse import parse_qs, urlparse

import pytest

from studiobook.exceptions import BookingValidationError
from studiobook.reports.csv_export import CSV_HEADERS, export_bookings_csv, report_filename
from studiobook.reports.invoice import (
    booking_reference,
    build_invoice_pdf,
    format_amount,
    invoice_filename,
    whatsapp_share_url,
)
from studiobook.reports.report_pdf import build_report_pdf, build_type_chart
from studiobook.schemas.booking_schema import BookingStatus
from tests.conftest import make_booking


def _completed(**kwargs):
    return make_booking(
        booking_id="3f9a2c1d-0000-4000-8000-000000000000",
        status=BookingStatus.COMPLETED,
        actual_end_time="12:30",
        **kwargs,
    )


class TestCsvExport:
    def test_header_and_rows(self):
        bookings = [
            make_booking("b-001", client_name="Arun", duration_hours=2),
            make_booking("b-002", client_name="Priya, K", date="2024-06-05", phone_number=None,
                         duration_hours=1.5, status=BookingStatus.CANCELLED),
            make_booking("b-003", date="2024-07-01"),
        ]
        rows = list(csv.reader(StringIO(export_bookings_csv(bookings, "2024-06-01", "2024-06-30"))))
        assert rows[0] == CSV_HEADERS
        assert rows[1] == ["2024-06-01", "10:00", "Arun", "9840123456", "Vocal Recording", "2", "N/A", "CONFIRMED"]
        assert rows[2] == ["2024-06-05", "10:00", "Priya, K", "N/A", "Vocal Recording", "1.5", "N/A", "CANCELLED"]
        assert len(rows) == 3

    def test_empty_range_has_header_only(self):
        text = export_bookings_csv([make_booking()], "2025-01-01", "2025-01-31")
        assert text == ",".join(CSV_HEADERS) + "\n"

    def test_report_filename(self):
        assert report_filename("s_cube_studioz", "2024-05-01", "2024-05-31") == (
            "s_cube_studioz_report_2024-05-01_to_2024-05-31.csv"
        )


class TestInvoice:
    def test_pdf_bytes(self):
        pdf = build_invoice_pdf(_completed(), 1000, invoice_date=date(2024, 6, 1))
        assert pdf.startswith(b"%PDF")

    def test_markup_in_names_is_safe(self):
        pdf = build_invoice_pdf(_completed(client_name="A <b>& Co"), 1000)
        assert pdf.startswith(b"%PDF")

    def test_filename(self):
        assert invoice_filename(_completed(client_name="Arun Kumar")) == "Invoice_Arun_Kumar_2024-06-01.pdf"

    def test_reference(self):
        assert booking_reference(_completed()) == "#3F9A2C1D"

    @pytest.mark.parametrize("value,expected", [(2000, "2000"), (1250.5, "1250.50")])
    def test_format_amount(self, value, expected):
        assert format_amount(value) == expected


class TestWhatsAppShare:
    def test_url(self):
        url = whatsapp_share_url(_completed(phone_number="+91 98401-23456"), 2000)
        parsed = urlparse(url)
        assert parsed.netloc == "wa.me"
        assert parsed.path == "/919840123456"
        message = parse_qs(parsed.query)["text"][0]
        assert message.startswith("Hello Arun Kumar,")
        assert "Total Amount:" in message
        assert "2000" in message

    @pytest.mark.parametrize("phone", [None, "", "n/a"])
    def test_missing_phone(self, phone):
        with pytest.raises(BookingValidationError, match="phone number is missing"):
            whatsapp_share_url(_completed(phone_number=phone), 2000)


class TestReportPdf:
    def test_pdf_bytes(self):
        bookings = [
            make_booking("b-001", type="Vocal Recording"),
            make_booking("b-002", start_time="14:00", type="Dubbing", status=BookingStatus.CANCELLED),
        ]
        assert build_report_pdf(bookings, "2024-06-01", "2024-06-30").startswith(b"%PDF")

    def test_empty_range(self):
        assert build_report_pdf([], "2024-06-01", "2024-06-30").startswith(b"%PDF")

    def test_chart_placeholder_when_empty(self):
        drawing = build_type_chart({})
        assert drawing.contents[0].text == "No data for this period"
