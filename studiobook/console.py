"""
Console front end for the studio booking manager.

Every sub-command loads the booking store, runs one operation through the
rules engine and prints the result. AI helpers run as coroutines through
``asyncio.run``.

Usage:
    studiobook dashboard --summary
    studiobook add --client "Arun" --date 2024-06-01 --time 10:00 --duration 2
    studiobook fill "Book Priya tomorrow evening 6 for two hours of vocals" --save
    studiobook fill --audio request.webm
    studiobook complete 3f9a2c1d --end 13:30
    studiobook invoice 3f9a2c1d --rate 1200 --share
    studiobook calendar --month 2024-06 --select 2024-06-01
    studiobook report --from 2024-05-01 --to 2024-05-31 --csv may.csv --pdf may.pdf
    studiobook ask "When is Priya recording?"
"""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Iterable, Optional

from studiobook.ai.assistant import ask_studio_assistant, generate_session_summary
from studiobook.ai.extraction import (
    UNDERSTAND_FAILURE_MESSAGE,
    parse_booking_request,
    parse_voice_booking_request,
)
from studiobook.calendar_view import (
    WEEKDAY_HEADERS,
    build_month_view,
    next_month,
    previous_month,
    selected_day_bookings,
)
from studiobook.config import settings
from studiobook.engine.draft import BookingDraft
from studiobook.engine.rules import (
    aggregate_stats,
    filter_by_range,
    session_type_breakdown,
    todays_and_upcoming,
)
from studiobook.engine.state_machine import default_end_time
from studiobook.exceptions import BookingError
from studiobook.reports.csv_export import export_bookings_csv, report_filename
from studiobook.reports.invoice import build_invoice_pdf, invoice_filename, whatsapp_share_url
from studiobook.reports.report_pdf import build_report_pdf
from studiobook.schemas.booking_schema import Booking, BookingStatus
from studiobook.store.booking_store import BookingStore
from studiobook.store.persistence import BookingRepository, JsonFileKeyValueStore
from studiobook.utils import default_report_range, format_hours, slugify, today_iso

logger = logging.getLogger(__name__)

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
MAGENTA = "\033[95m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

STATUS_COLORS = {
    BookingStatus.CONFIRMED: BLUE,
    BookingStatus.COMPLETED: GREEN,
    BookingStatus.CANCELLED: RED,
}

AUDIO_UNAVAILABLE_MESSAGE = "Audio recording unavailable"

# Draft fields settable from the command line: (argparse dest, draft field)
DRAFT_ARGS = [
    ("client", "client_name"),
    ("phone", "phone_number"),
    ("date", "date"),
    ("time", "start_time"),
    ("duration", "duration_hours"),
    ("type", "type"),
    ("notes", "notes"),
]


def build_store(data_file: Optional[str] = None) -> BookingStore:
    """Open the configured JSON-file store and hydrate the collection."""
    kv = JsonFileKeyValueStore(data_file or settings.storage.data_file)
    return BookingStore(BookingRepository(kv, settings.storage.storage_key)).load()


# ---------------------------------------------------------------------- #
# Output helpers
# ---------------------------------------------------------------------- #

def say(text: str, color: str = "") -> None:
    print(f"{color}{text}{RESET}" if color else text)


def heading(text: str) -> None:
    print(f"\n{BOLD}{text}{RESET}")


def format_booking(booking: Booking) -> str:
    color = STATUS_COLORS[booking.status]
    line = (
        f"{DIM}{booking.id[:8]}{RESET}  {booking.date} {booking.start_time}  "
        f"{BOLD}{booking.client_name}{RESET}  {booking.type}  "
        f"{format_hours(booking.duration_hours)}h  {color}{booking.status.value}{RESET}"
    )
    if booking.phone_number:
        line += f"  {DIM}{booking.phone_number}{RESET}"
    if booking.actual_end_time:
        line += f"  {DIM}ended {booking.actual_end_time}{RESET}"
    if booking.invoice_details:
        line += (
            f"  {MAGENTA}invoiced {settings.studio.currency_label} "
            f"{booking.invoice_details.total_amount:g}{RESET}"
        )
    return line


def print_bookings(bookings: Iterable[Booking], empty_message: str = "No sessions scheduled.") -> None:
    bookings = list(bookings)
    if not bookings:
        say(f"  {empty_message}", DIM)
        return
    for booking in bookings:
        print("  " + format_booking(booking))


def print_draft(draft: BookingDraft) -> None:
    for name, value in draft.to_dict().items():
        say(f"  {name.replace('_', ' ')}: {value}")
    missing = draft.missing_fields()
    if missing:
        say(f"  Still need: {', '.join(missing)}", YELLOW)


# ---------------------------------------------------------------------- #
# Commands
# ---------------------------------------------------------------------- #

def cmd_dashboard(args: argparse.Namespace, store: BookingStore) -> int:
    today = args.today or today_iso()
    todays, upcoming = todays_and_upcoming(store.bookings, today)

    if args.summary:
        relevant = [
            b for b in store.bookings
            if b.date >= today and b.status == BookingStatus.CONFIRMED
        ]
        summary = asyncio.run(generate_session_summary(relevant))
        heading("AI Studio Insight")
        say(f"  {summary}", MAGENTA)

    heading(f"Today's Sessions ({today})")
    print_bookings(todays)
    heading("Upcoming")
    print_bookings(
        [b for b in upcoming if b.date != today][: settings.studio.upcoming_limit],
        "No upcoming sessions.",
    )
    return 0


def _draft_from_args(args: argparse.Namespace, draft: BookingDraft) -> bool:
    ok_all = True
    for dest, field_name in DRAFT_ARGS:
        value = getattr(args, dest, None)
        if value is None:
            continue
        ok, msg = draft.set_field(field_name, value)
        if not ok:
            say(msg, RED)
            ok_all = False
    return ok_all


def _create(store: BookingStore, draft: BookingDraft) -> int:
    booking = store.create(draft)
    say(f"Booking confirmed: {booking.id[:8]}", GREEN)
    print("  " + format_booking(booking))
    return 0


def cmd_add(args: argparse.Namespace, store: BookingStore) -> int:
    draft = BookingDraft.with_defaults(args.today)
    if not _draft_from_args(args, draft):
        return 1
    return _create(store, draft)


def _read_audio(path: str) -> Optional[bytes]:
    try:
        audio = Path(path).read_bytes()
    except OSError as e:
        say(f"{AUDIO_UNAVAILABLE_MESSAGE}: {e}", RED)
        return None
    if not audio:
        say(f"{AUDIO_UNAVAILABLE_MESSAGE}: {path} is empty", RED)
        return None
    return audio


def _guess_mime(path: str, explicit: Optional[str]) -> str:
    return explicit or mimetypes.guess_type(path)[0] or "audio/webm"


def cmd_fill(args: argparse.Namespace, store: BookingStore) -> int:
    today = args.today or today_iso()
    if args.audio:
        audio = _read_audio(args.audio)
        if audio is None:
            return 1
        say("Listening...", DIM)
        proposal = asyncio.run(
            parse_voice_booking_request(audio, _guess_mime(args.audio, args.mime), today)
        )
    elif args.text:
        say("Analyzing...", DIM)
        proposal = asyncio.run(parse_booking_request(" ".join(args.text), today))
    else:
        say("Describe the booking as text or pass --audio.", YELLOW)
        return 1

    if proposal is None:
        say(UNDERSTAND_FAILURE_MESSAGE, RED)
        return 1

    draft = BookingDraft.with_defaults(today)
    rejected = draft.apply_proposal(proposal)
    for name in rejected:
        say(f"  Ignored unusable {name.replace('_', ' ')}: {draft.rejected[name]!r}", YELLOW)
    if not _draft_from_args(args, draft):
        return 1

    heading("Proposed booking")
    print_draft(draft)
    if not args.save:
        say("\nRe-run with --save to create this booking.", DIM)
        return 0
    return _create(store, draft)


def cmd_list(args: argparse.Namespace, store: BookingStore) -> int:
    bookings = list(store.bookings)
    if args.date:
        bookings = [b for b in bookings if b.date == args.date]
    if args.date_from or args.date_to:
        bookings = filter_by_range(bookings, args.date_from or "0000-00-00", args.date_to or "9999-99-99")
    if args.status:
        bookings = [b for b in bookings if b.status == BookingStatus(args.status)]
    bookings.sort(key=lambda b: b.date + b.start_time)
    print_bookings(bookings, "No bookings found.")
    return 0


def cmd_cancel(args: argparse.Namespace, store: BookingStore) -> int:
    booking = store.cancel(store.find(args.booking).id)
    say(f"Booking {booking.id[:8]} cancelled.", YELLOW)
    return 0


def cmd_complete(args: argparse.Namespace, store: BookingStore) -> int:
    booking = store.find(args.booking)
    end_time = args.end or default_end_time(booking)
    booking = store.complete(booking.id, end_time)
    say(f"Session completed at {booking.actual_end_time}.", GREEN)
    print("  " + format_booking(booking))
    return 0


def cmd_invoice(args: argparse.Namespace, store: BookingStore) -> int:
    booking = store.find(args.booking)
    rate = args.rate
    if rate is None:
        rate = (
            booking.invoice_details.rate_per_hour
            if booking.invoice_details
            else settings.studio.default_rate_per_hour
        )
    booking = store.update_invoice(booking.id, rate)
    total = booking.invoice_details.total_amount

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / invoice_filename(booking)
    path.write_bytes(build_invoice_pdf(booking, rate))
    say(f"Invoice saved to {path} ({settings.studio.currency_label} {total:g})", GREEN)

    if args.share:
        say(f"Share: {whatsapp_share_url(booking, total)}", BLUE)
    return 0


def cmd_calendar(args: argparse.Namespace, store: BookingStore) -> int:
    today = args.today or today_iso()
    year, month = (int(p) for p in (args.month or today[:7]).split("-"))
    for _ in range(args.prev):
        year, month = previous_month(year, month)
    for _ in range(args.next):
        year, month = next_month(year, month)
    selected = args.select or today
    view = build_month_view(store.bookings, year, month, today, selected)

    heading(view.title)
    print("  " + " ".join(f"{h:>4}" for h in WEEKDAY_HEADERS))
    for week in view.weeks():
        cells = []
        for cell in week:
            if cell is None:
                cells.append("    ")
                continue
            mark = "*" if cell.has_bookings else " "
            text = f"{cell.day:>3}{mark}"
            if cell.is_selected:
                text = f"{BOLD}{MAGENTA}{text}{RESET}"
            elif cell.is_today:
                text = f"{BOLD}{text}{RESET}"
            cells.append(text)
        print("  " + " ".join(cells))

    heading(f"Sessions on {selected}")
    print_bookings(selected_day_bookings(store.bookings, selected))
    return 0


def cmd_report(args: argparse.Namespace, store: BookingStore) -> int:
    default_from, default_to = default_report_range(args.today or today_iso())
    date_from = args.date_from or default_from
    date_to = args.date_to or default_to

    stats = aggregate_stats(store.bookings, date_from, date_to)
    heading(f"Report {date_from} to {date_to}")
    say(f"  Total sessions: {stats.total_bookings}")
    say(f"  Completed:      {stats.completed_bookings}", GREEN)
    say(f"  Cancelled:      {stats.cancelled_bookings}", RED)
    say(f"  Total hours:    {format_hours(stats.total_hours)}")

    heading("Session types")
    breakdown = session_type_breakdown(filter_by_range(store.bookings, date_from, date_to))
    if not breakdown:
        say("  No data for this period", DIM)
    for session_type, count in breakdown.items():
        say(f"  {session_type:<22} {'#' * count} {count}")

    slug = slugify(settings.studio.name)
    if args.csv is not None:
        path = Path(args.csv or report_filename(slug, date_from, date_to))
        path.write_text(export_bookings_csv(store.bookings, date_from, date_to), encoding="utf-8")
        say(f"CSV saved to {path}", GREEN)
    if args.pdf is not None:
        path = Path(args.pdf or report_filename(slug, date_from, date_to, "pdf"))
        path.write_bytes(build_report_pdf(store.bookings, date_from, date_to))
        say(f"PDF saved to {path}", GREEN)
    return 0


def cmd_ask(args: argparse.Namespace, store: BookingStore) -> int:
    audio = None
    if args.audio:
        audio = _read_audio(args.audio)
        if audio is None:
            return 1
    question = " ".join(args.question) if args.question else None
    answer = asyncio.run(
        ask_studio_assistant(
            question,
            audio,
            store.bookings,
            today=args.today or today_iso(),
            mime_type=_guess_mime(args.audio, args.mime) if args.audio else "audio/webm",
        )
    )
    say(answer, MAGENTA)
    return 0


# ---------------------------------------------------------------------- #
# Argument parsing
# ---------------------------------------------------------------------- #

def _add_draft_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--client", help="Client name")
    parser.add_argument("--phone", help="Client phone number")
    parser.add_argument("--date", help="Session date, YYYY-MM-DD")
    parser.add_argument("--time", help="Start time, HH:MM (24-hour)")
    parser.add_argument("--duration", type=float, help="Duration in hours")
    parser.add_argument("--type", help="Session type, e.g. 'Vocal Recording'")
    parser.add_argument("--notes", help="Free-text notes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studiobook", description=f"{settings.studio.name} booking manager"
    )
    parser.add_argument("--data-file", help="Override the JSON store location")
    parser.add_argument("--today", help=argparse.SUPPRESS)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("dashboard", help="Today's and upcoming sessions")
    p.add_argument("--summary", action="store_true", help="Include an AI schedule summary")
    p.set_defaults(handler=cmd_dashboard)

    p = sub.add_parser("add", help="Create a booking")
    _add_draft_arguments(p)
    p.set_defaults(handler=cmd_add)

    p = sub.add_parser("fill", help="AI-assisted booking from text or a voice recording")
    p.add_argument("text", nargs="*", help="Booking request in plain words")
    p.add_argument("--audio", help="Path to a recorded voice request")
    p.add_argument("--mime", help="Audio MIME type (guessed from the file name)")
    p.add_argument("--save", action="store_true", help="Create the booking")
    _add_draft_arguments(p)
    p.set_defaults(handler=cmd_fill)

    p = sub.add_parser("list", help="List bookings")
    p.add_argument("--date", help="Only this date")
    p.add_argument("--from", dest="date_from", help="Range start, YYYY-MM-DD")
    p.add_argument("--to", dest="date_to", help="Range end, YYYY-MM-DD")
    p.add_argument("--status", choices=[s.value for s in BookingStatus])
    p.set_defaults(handler=cmd_list)

    p = sub.add_parser("cancel", help="Cancel a confirmed booking")
    p.add_argument("booking", help="Booking id or id prefix")
    p.set_defaults(handler=cmd_cancel)

    p = sub.add_parser("complete", help="Mark a session completed")
    p.add_argument("booking", help="Booking id or id prefix")
    p.add_argument("--end", help="Actual end time HH:MM (default: start + duration)")
    p.set_defaults(handler=cmd_complete)

    p = sub.add_parser("invoice", help="Generate an invoice PDF for a completed session")
    p.add_argument("booking", help="Booking id or id prefix")
    p.add_argument("--rate", type=float, help="Hourly rate")
    p.add_argument("--out", default=".", help="Output directory")
    p.add_argument("--share", action="store_true", help="Print a WhatsApp share link")
    p.set_defaults(handler=cmd_invoice)

    p = sub.add_parser("calendar", help="Month calendar")
    p.add_argument("--month", help="YYYY-MM (default: current month)")
    p.add_argument("--prev", action="count", default=0, help="Step back one month (repeatable)")
    p.add_argument("--next", action="count", default=0, help="Step forward one month (repeatable)")
    p.add_argument("--select", help="Day to list, YYYY-MM-DD (default: today)")
    p.set_defaults(handler=cmd_calendar)

    p = sub.add_parser("report", help="Statistics and exports for a date range")
    p.add_argument("--from", dest="date_from", help="Range start (default: one month ago)")
    p.add_argument("--to", dest="date_to", help="Range end (default: today)")
    p.add_argument("--csv", nargs="?", const="", help="Write a CSV export (optional path)")
    p.add_argument("--pdf", nargs="?", const="", help="Write a PDF report (optional path)")
    p.set_defaults(handler=cmd_report)

    p = sub.add_parser("ask", help="Ask the AI assistant about the schedule")
    p.add_argument("question", nargs="*")
    p.add_argument("--audio", help="Path to a recorded question")
    p.add_argument("--mime", help="Audio MIME type (guessed from the file name)")
    p.set_defaults(handler=cmd_ask)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    store = build_store(args.data_file)
    try:
        return args.handler(args, store)
    except BookingError as e:
        say(str(e), RED)
        return 1


if __name__ == "__main__":
    sys.exit(main())
