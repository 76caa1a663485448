"""
Ticket Reconciler
Merges primary (Eventbrite) and secondary (Google Sheets) tickets into one
canonical ticket set.

Precedence:
- Eventbrite is the source of truth for which tickets exist
- Google Sheets only corrects referrers of existing orders and contributes
  orders Eventbrite does not know about
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import structlog

from shared.schemas.leaderboard import DataSourceStats
from shared.schemas.ticket import NormalizedTicket

logger = structlog.get_logger()

# (source, order id, seat or position); seats are str and positions int
TicketKey = tuple[str, Optional[str], Union[str, int]]


@dataclass
class ReconciliationResult:
    """Canonical ticket set plus exact provenance counters"""
    tickets: dict[TicketKey, NormalizedTicket] = field(default_factory=dict)
    from_primary: int = 0
    only_in_secondary: int = 0
    referrers_updated: int = 0

    @property
    def total_tickets(self) -> int:
        return len(self.tickets)

    def stats(self) -> DataSourceStats:
        return DataSourceStats(
            from_primary=self.from_primary,
            only_in_secondary=self.only_in_secondary,
            referrers_updated=self.referrers_updated,
        )


def primary_key(ticket: NormalizedTicket, index: int) -> TicketKey:
    """Primary tickets are never merged with each other"""
    return ("primary", ticket.order_id, index)


def secondary_key(ticket: NormalizedTicket, index: int) -> TicketKey:
    """Rows repeating the same order and seat collapse onto one key"""
    if not ticket.order_id:
        return ("secondary", None, index)
    return ("secondary", ticket.order_id, ticket.seat or index)


def build_referrer_lookup(secondary: Sequence[NormalizedTicket]) -> dict[str, str]:
    """Order id -> referrer from the sheet; later rows overwrite earlier ones"""
    lookup: dict[str, str] = {}
    for ticket in secondary:
        if ticket.order_id and ticket.referrer:
            lookup[ticket.order_id] = ticket.referrer
    return lookup


def reconcile(
    primary: Sequence[NormalizedTicket],
    secondary: Optional[Sequence[NormalizedTicket]] = None,
) -> ReconciliationResult:
    """
    Build the canonical ticket set.

    Args:
        primary: Tickets from Eventbrite
        secondary: Tickets from Google Sheets (may be empty)

    Returns:
        ReconciliationResult with the keyed ticket set and counters
    """
    secondary = secondary or []
    result = ReconciliationResult()

    referrer_lookup = build_referrer_lookup(secondary)
    logger.info("Found referrer updates in Google Sheets", orders=len(referrer_lookup))

    # Every primary ticket is kept; the sheet may only correct its referrer
    for index, ticket in enumerate(primary):
        updated_referrer = referrer_lookup.get(ticket.order_id) if ticket.order_id else None
        if updated_referrer is not None and updated_referrer != ticket.referrer:
            ticket = ticket.model_copy(update={"referrer": updated_referrer})
            result.referrers_updated += 1
        result.tickets[primary_key(ticket, index)] = ticket
        result.from_primary += 1

    logger.info("Updated primary tickets from Google Sheets", count=result.referrers_updated)

    primary_order_ids = {ticket.order_id for ticket in primary if ticket.order_id}
    for index, ticket in enumerate(secondary):
        if ticket.order_id and ticket.order_id in primary_order_ids:
            continue
        key = secondary_key(ticket, index)
        if key in result.tickets:
            # Later rows for the same order and seat replace earlier ones
            logger.debug("Duplicate sheet row", order_id=ticket.order_id, seat=ticket.seat)
        else:
            result.only_in_secondary += 1
        result.tickets[key] = ticket

    logger.info(
        "Reconciled tickets",
        total=result.total_tickets,
        from_primary=result.from_primary,
        only_in_secondary=result.only_in_secondary,
        referrers_updated=result.referrers_updated,
    )
    return result
