"""
Ticket Normalizers
Converts raw Eventbrite attendees and Google Sheets rows to NormalizedTicket
"""

from dataclasses import dataclass, fields
from typing import Any, Iterable, Optional

import structlog

from shared.schemas.ticket import NormalizedTicket, TicketSource, clean_referrer

logger = structlog.get_logger()


def _clean(value: Any) -> Optional[str]:
    """Trim a scalar to a string; blank becomes None"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class AttendeeNormalizer:
    """
    Normalizes Eventbrite attendee payloads to NormalizedTicket.

    Features:
    - Keeps only "Attending" / "Checked In" attendees
    - Extracts the referring dancer from survey answers
    - Falls back from assigned seat to first barcode for the seat value
    """

    ATTENDING_STATUSES = frozenset({"attending", "checked in"})

    # Survey question that carries the referral
    REFERRAL_QUESTION = "which company dancer referred you"

    def normalize(self, raw: dict) -> Optional[NormalizedTicket]:
        """
        Normalize one attendee record.

        Args:
            raw: Attendee dict from the Eventbrite attendees API

        Returns:
            NormalizedTicket, or None if the attendee is not attending or not a dict
        """
        if not isinstance(raw, dict):
            return None

        status = _clean(raw.get("status"))
        if not self.is_attending(status):
            return None

        order_id = _clean(raw.get("order_id"))
        if not order_id:
            # Still counted, but never matched against sheet rows
            logger.debug("Attendee without order id", attendee_id=raw.get("id"))

        profile = raw.get("profile") or {}
        if not isinstance(profile, dict):
            profile = {}

        return NormalizedTicket(
            event_id=_clean(raw.get("event_id")),
            order_id=order_id,
            seat=self._extract_seat(raw),
            first_name=_clean(profile.get("first_name")),
            last_name=_clean(profile.get("last_name")),
            email=_clean(profile.get("email")),
            status=status,
            referrer=self._extract_referrer(raw.get("answers")),
            source=TicketSource.PRIMARY,
        )

    def normalize_many(self, attendees: Iterable[dict]) -> list[NormalizedTicket]:
        """Normalize a list of attendees, dropping non-attending ones"""
        tickets = []
        for raw in attendees or []:
            ticket = self.normalize(raw)
            if ticket is not None:
                tickets.append(ticket)
        return tickets

    def is_attending(self, status: Optional[str]) -> bool:
        return bool(status) and status.lower() in self.ATTENDING_STATUSES

    def _extract_referrer(self, answers: Any) -> Optional[str]:
        """Scan survey answers; the last usable referral answer wins"""
        if not isinstance(answers, list):
            return None
        referrer = None
        for answer in answers:
            if not isinstance(answer, dict):
                continue
            question = answer.get("question")
            if not isinstance(question, str) or self.REFERRAL_QUESTION not in question.lower():
                continue
            name = clean_referrer(answer.get("answer"))
            if name:
                referrer = name
        return referrer

    def _extract_seat(self, raw: dict) -> Optional[str]:
        """Seat: assigned number, else first barcode, else None"""
        seat = _clean(raw.get("assigned_number"))
        if seat:
            return seat
        barcodes = raw.get("barcodes")
        if isinstance(barcodes, list) and barcodes and isinstance(barcodes[0], dict):
            return _clean(barcodes[0].get("barcode"))
        return None


@dataclass(frozen=True)
class SheetRow:
    """
    Named view of one spreadsheet row (columns A through L).
    Columns past the end of a short row are None.
    """
    event_name: Optional[str] = None
    event_id: Optional[str] = None
    order_id: Optional[str] = None
    order_date: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    location_1: Optional[str] = None
    location_2: Optional[str] = None
    location_3: Optional[str] = None
    attendee_status: Optional[str] = None
    referrer: Optional[str] = None

    @classmethod
    def from_cells(cls, cells: list[Any]) -> "SheetRow":
        names = [f.name for f in fields(cls)]
        return cls(**{name: _clean(value) for name, value in zip(names, cells)})


@dataclass(frozen=True)
class RowOutcome:
    """Result of validating one row: a ticket, or the reason it was skipped"""
    ticket: Optional[NormalizedTicket] = None
    reason: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.ticket is not None


class SheetRowNormalizer:
    """
    Normalizes Google Sheets export rows to NormalizedTicket.

    Column layout: Event Name, Event ID, Order #, Order Date, First Name,
    Last Name, Email, Location 1, Location 2, Location 3, Attendee Status,
    Which company dancer referred you?
    """

    # Rows must reach the Attendee Status column
    MIN_COLUMNS = 11
    ATTENDING_MARKER = "attending"

    def parse(self, cells: Any) -> RowOutcome:
        """Validate and map one row"""
        if not isinstance(cells, list):
            return RowOutcome(reason="not a row")
        if len(cells) < self.MIN_COLUMNS:
            return RowOutcome(reason="short row")

        row = SheetRow.from_cells(cells)
        status = row.attendee_status
        if not status or self.ATTENDING_MARKER not in status.lower():
            return RowOutcome(reason="not attending")

        ticket = NormalizedTicket(
            event_id=row.event_id,
            order_id=row.order_id,
            seat=row.location_3,  # Location 3 holds the seat number
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            status=status,
            referrer=row.referrer,
            source=TicketSource.SECONDARY,
        )
        return RowOutcome(ticket=ticket)

    def normalize_rows(self, rows: Iterable[Any], skip_header: bool = True) -> list[NormalizedTicket]:
        """Normalize all data rows, silently dropping skipped ones"""
        data_rows = list(rows or [])
        if skip_header:
            data_rows = data_rows[1:]

        tickets = []
        skipped = 0
        for cells in data_rows:
            outcome = self.parse(cells)
            if outcome.is_valid:
                tickets.append(outcome.ticket)
            else:
                skipped += 1

        logger.debug("Normalized sheet rows", tickets=len(tickets), skipped=skipped)
        return tickets


# Default normalizer instances
default_attendee_normalizer = AttendeeNormalizer()
default_row_normalizer = SheetRowNormalizer()


def normalize_attendees(attendees: Iterable[dict]) -> list[NormalizedTicket]:
    """Convenience function to normalize Eventbrite attendees"""
    return default_attendee_normalizer.normalize_many(attendees)


def normalize_sheet_rows(rows: Iterable[Any]) -> list[NormalizedTicket]:
    """Convenience function to normalize a sheet range including its header row"""
    return default_row_normalizer.normalize_rows(rows)
