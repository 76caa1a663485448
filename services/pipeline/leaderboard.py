"""
Referrer Leaderboard
Reduces the canonical ticket set to ticket counts per referrer
"""

from typing import Iterable

from shared.schemas.leaderboard import LeaderboardEntry
from shared.schemas.ticket import NormalizedTicket, clean_referrer


def count_referrals(tickets: Iterable[NormalizedTicket]) -> dict[str, int]:
    """Tickets per referrer, keyed in first-seen order"""
    counts: dict[str, int] = {}
    for ticket in tickets:
        name = clean_referrer(ticket.referrer)
        if name is None:
            continue
        counts[name] = counts.get(name, 0) + 1
    return counts


def build_leaderboard(tickets: Iterable[NormalizedTicket]) -> list[LeaderboardEntry]:
    """
    Rank referrers by ticket count, highest first.

    Ties keep first-seen order (sorted() is stable under reverse=True).
    Tickets without a referrer are not ranked.
    """
    counts = count_referrals(tickets)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [LeaderboardEntry(name=name, tickets=count) for name, count in ranked]
