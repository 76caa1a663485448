"""Leaderboard Shared Schemas"""

from .leaderboard import DataSourceStats, ErrorResponse, LeaderboardEntry, LeaderboardResponse
from .ticket import NormalizedTicket, TicketSource, clean_referrer

__all__ = [
    # Ticket schemas
    "NormalizedTicket",
    "TicketSource",
    "clean_referrer",
    # Response schemas
    "LeaderboardEntry",
    "DataSourceStats",
    "LeaderboardResponse",
    "ErrorResponse",
]
