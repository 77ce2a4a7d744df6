from studiobook.reports.csv_export import export_bookings_csv, report_filename
from studiobook.reports.invoice import build_invoice_pdf, invoice_filename, whatsapp_share_url
from studiobook.reports.report_pdf import build_report_pdf

__all__ = [
    "export_bookings_csv",
    "report_filename",
    "build_invoice_pdf",
    "invoice_filename",
    "whatsapp_share_url",
    "build_report_pdf",
]
