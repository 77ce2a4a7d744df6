"""
Invoice PDF generation and WhatsApp share link for completed sessions.

Produces a single-page branded invoice: studio header band, bill-to
block, one line item (session type x hours at the hourly rate) and the
total. The store's ``update_invoice`` records the same rate and total on
the booking.
"""

import io
import logging
import re
from datetime import date
from typing import Optional
from urllib.parse import quote
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from studiobook.config import settings
from studiobook.exceptions import BookingValidationError
from studiobook.schemas.booking_schema import Booking
from studiobook.utils import format_hours

logger = logging.getLogger(__name__)

HEADER_BACKGROUND = colors.Color(15 / 255, 5 / 255, 24 / 255)
TABLE_HEADER_BACKGROUND = colors.Color(240 / 255, 240 / 255, 240 / 255)


def format_amount(value: float) -> str:
    """Whole amounts without decimals, others to two places."""
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.2f}"


def booking_reference(booking: Booking) -> str:
    """Short reference printed on the invoice: first 8 id characters, upper-cased."""
    return "#" + booking.id[:8].upper()


def invoice_filename(booking: Booking) -> str:
    client = re.sub(r"\s+", "_", booking.client_name.strip())
    return f"Invoice_{client}_{booking.date}.pdf"


class InvoicePDFGenerator:
    """Builds the invoice document for one booking at a given hourly rate."""

    def __init__(self, booking: Booking, rate_per_hour: float, invoice_date: Optional[date] = None):
        self.booking = booking
        self.rate = rate_per_hour
        self.total = rate_per_hour * booking.duration_hours
        self.invoice_date = invoice_date or date.today()
        self.margin = 20 * mm
        self.studio = settings.studio

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=f"Invoice - {self.booking.client_name}",
        )

        styles = getSampleStyleSheet()
        body_style = ParagraphStyle("InvoiceBody", parent=styles["Normal"], fontSize=10)
        heading_style = ParagraphStyle(
            "InvoiceHeading", parent=styles["Heading2"], fontSize=16, spaceAfter=6
        )
        footer_style = ParagraphStyle(
            "InvoiceFooter", parent=body_style, fontSize=8, textColor=colors.grey, alignment=1
        )

        story = [self._header_band(styles), Spacer(1, 10 * mm)]

        story.append(Paragraph("INVOICE", heading_style))
        story.append(Paragraph(f"Invoice Date: {self.invoice_date.strftime('%d/%m/%Y')}", body_style))
        story.append(Paragraph(f"Booking Ref: {booking_reference(self.booking)}", body_style))
        story.append(Spacer(1, 8 * mm))

        story.append(Paragraph("<b>Bill To:</b>", body_style))
        story.append(Paragraph(escape(self.booking.client_name), body_style))
        if self.booking.phone_number:
            story.append(Paragraph(escape(self.booking.phone_number), body_style))
        story.append(Spacer(1, 8 * mm))

        story.append(self._line_items())
        story.append(Spacer(1, 6 * mm))
        story.append(self._total_row())

        story.append(Spacer(1, 20 * mm))
        story.append(Paragraph(escape(f"Thank you for choosing {self.studio.name.upper()}!"), footer_style))

        doc.build(story)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(
            "Generated invoice PDF for %s (%d bytes, total %s)",
            self.booking.id, len(pdf_bytes), format_amount(self.total),
        )
        return pdf_bytes

    def _header_band(self, styles) -> Table:
        title = ParagraphStyle(
            "BandTitle", parent=styles["Heading1"], fontSize=22, textColor=colors.white
        )
        subtitle = ParagraphStyle(
            "BandSubtitle", parent=styles["Normal"], fontSize=10, textColor=colors.white
        )
        band = Table(
            [
                [Paragraph(escape(self.studio.name.upper()), title)],
                [Paragraph(escape(self.studio.tagline), subtitle)],
            ],
            colWidths=[170 * mm],
        )
        band.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), HEADER_BACKGROUND),
                    ("LEFTPADDING", (0, 0), (-1, -1), 8),
                    ("TOPPADDING", (0, 0), (-1, 0), 10),
                    ("BOTTOMPADDING", (0, -1), (-1, -1), 10),
                ]
            )
        )
        return band

    def _line_items(self) -> Table:
        data = [
            ["Description", "Rate/Hr", "Hours", "Amount"],
            [
                f"{self.booking.type} Session",
                format_amount(self.rate),
                format_hours(self.booking.duration_hours),
                format_amount(self.total),
            ],
        ]
        table = Table(data, colWidths=[85 * mm, 30 * mm, 25 * mm, 30 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), TABLE_HEADER_BACKGROUND),
                    ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 10),
                    ("FONT", (0, 1), (-1, -1), "Helvetica", 10),
                    ("ALIGN", (-1, 0), (-1, -1), "RIGHT"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        return table

    def _total_row(self) -> Table:
        table = Table(
            [["Total Amount:", f"{self.studio.currency_label} {format_amount(self.total)}"]],
            colWidths=[140 * mm, 30 * mm],
        )
        table.setStyle(
            TableStyle(
                [
                    ("FONT", (0, 0), (-1, -1), "Helvetica-Bold", 14),
                    ("ALIGN", (0, 0), (0, 0), "RIGHT"),
                    ("ALIGN", (1, 0), (1, 0), "RIGHT"),
                    ("LINEABOVE", (0, 0), (-1, 0), 0.5, colors.Color(200 / 255, 200 / 255, 200 / 255)),
                    ("TOPPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )
        return table


def build_invoice_pdf(booking: Booking, rate_per_hour: float, invoice_date: Optional[date] = None) -> bytes:
    """Render the invoice for ``booking`` at ``rate_per_hour`` as PDF bytes."""
    return InvoicePDFGenerator(booking, rate_per_hour, invoice_date).generate()


def whatsapp_share_url(booking: Booking, total: float) -> str:
    """
    Build a wa.me link that pre-fills the invoice message for the client.

    Raises:
        BookingValidationError: If the booking has no phone number.
    """
    digits = re.sub(r"[^0-9]", "", booking.phone_number or "")
    if not digits:
        raise BookingValidationError("Client phone number is missing!", fields=["phoneNumber"])

    studio = settings.studio
    message = (
        f"Hello {booking.client_name},\n"
        f"Here is your invoice for the {booking.type} session at {studio.name.upper()}.\n\n"
        f"Date: {booking.date}\n"
        f"Duration: {format_hours(booking.duration_hours)} hrs\n"
        f"Total Amount: {studio.currency_label} {format_amount(total)}\n\n"
        "Thank you!"
    )
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"
