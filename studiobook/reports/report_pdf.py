"""
Date-range report PDF: summary figures, session-type bar chart and the
booking list for the range.
"""

import io
import logging
from typing import Iterable
from xml.sax.saxutils import escape

from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.graphics.shapes import Drawing, String
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from studiobook.config import settings
from studiobook.engine.rules import aggregate_stats, filter_by_range, session_type_breakdown
from studiobook.schemas.booking_schema import Booking, BookingStatus
from studiobook.utils import format_hours

logger = logging.getLogger(__name__)

BRAND_COLOR = colors.HexColor("#7c3aed")
STATUS_COLORS = {
    BookingStatus.CONFIRMED: colors.HexColor("#2563eb"),
    BookingStatus.COMPLETED: colors.HexColor("#16a34a"),
    BookingStatus.CANCELLED: colors.HexColor("#dc2626"),
}

CHART_WIDTH = 170 * mm
CHART_HEIGHT = 70 * mm


def build_type_chart(counts: dict[str, int]) -> Drawing:
    """Bar chart of session counts per type; a placeholder note when empty."""
    drawing = Drawing(CHART_WIDTH, CHART_HEIGHT)
    if not counts:
        drawing.add(String(CHART_WIDTH / 2, CHART_HEIGHT / 2, "No data for this period",
                           textAnchor="middle", fillColor=colors.grey))
        return drawing

    chart = VerticalBarChart()
    chart.x = 12 * mm
    chart.y = 12 * mm
    chart.width = CHART_WIDTH - 20 * mm
    chart.height = CHART_HEIGHT - 20 * mm
    chart.data = [list(counts.values())]
    chart.categoryAxis.categoryNames = list(counts.keys())
    chart.categoryAxis.labels.fontSize = 7
    chart.valueAxis.valueMin = 0
    chart.valueAxis.valueStep = max(1, max(counts.values()) // 5)
    chart.bars[0].fillColor = BRAND_COLOR
    chart.bars[0].strokeColor = None
    drawing.add(chart)
    return drawing


def build_report_pdf(bookings: Iterable[Booking], date_from: str, date_to: str) -> bytes:
    """Render the report for bookings dated within [date_from, date_to]."""
    bookings = list(bookings)
    in_range = filter_by_range(bookings, date_from, date_to)
    stats = aggregate_stats(bookings, date_from, date_to)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title=f"Booking report {date_from} to {date_to}",
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle", parent=styles["Heading1"], textColor=BRAND_COLOR, spaceAfter=4
    )
    heading_style = ParagraphStyle(
        "ReportHeading", parent=styles["Heading2"], fontSize=13, spaceBefore=12, spaceAfter=6
    )

    story = [
        Paragraph(escape(settings.studio.name.upper()), title_style),
        Paragraph(f"Booking report: {date_from} to {date_to}", styles["Normal"]),
        Spacer(1, 6 * mm),
    ]

    summary = Table(
        [
            ["Total Sessions", "Completed", "Cancelled", "Total Hours"],
            [
                str(stats.total_bookings),
                str(stats.completed_bookings),
                str(stats.cancelled_bookings),
                format_hours(stats.total_hours),
            ],
        ],
        colWidths=[42.5 * mm] * 4,
    )
    summary.setStyle(
        TableStyle(
            [
                ("FONT", (0, 0), (-1, 0), "Helvetica", 9),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.grey),
                ("FONT", (0, 1), (-1, 1), "Helvetica-Bold", 16),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("BOX", (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ]
        )
    )
    story.append(summary)

    story.append(Paragraph("Session Types", heading_style))
    story.append(build_type_chart(session_type_breakdown(in_range)))

    story.append(Paragraph("Bookings", heading_style))
    if in_range:
        rows = [["Date", "Time", "Client", "Type", "Hrs", "Status"]]
        rows += [
            [b.date, b.start_time, b.client_name, b.type, format_hours(b.duration_hours), b.status.value]
            for b in in_range
        ]
        table = Table(rows, colWidths=[24 * mm, 16 * mm, 45 * mm, 45 * mm, 12 * mm, 28 * mm],
                      repeatRows=1)
        style = [
            ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 9),
            ("FONT", (0, 1), (-1, -1), "Helvetica", 9),
            ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.grey),
        ]
        for row_index, booking in enumerate(in_range, start=1):
            style.append(("TEXTCOLOR", (5, row_index), (5, row_index), STATUS_COLORS[booking.status]))
        table.setStyle(TableStyle(style))
        story.append(table)
    else:
        story.append(Paragraph("No bookings found for this period.", styles["Normal"]))

    doc.build(story)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    logger.info("Generated report PDF for %s to %s (%d bookings)", date_from, date_to, len(in_range))
    return pdf_bytes
