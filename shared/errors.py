"""
Leaderboard Error Hierarchy
Each source and stage raises a specific error type so the API boundary can
map failures to a response without inspecting messages.
"""

from typing import Optional


class LeaderboardError(Exception):
    """Base exception for all leaderboard engine failures."""


class ConfigurationError(LeaderboardError):
    """Raised when required configuration is missing or invalid."""


class SourceFetchError(LeaderboardError):
    """
    Raised when the primary ticketing API cannot be read.

    Aborts the whole engine invocation; a partial leaderboard is never built.
    """

    def __init__(
        self,
        message: str,
        event_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.event_id = event_id
        self.status_code = status_code


class SecondarySourceError(LeaderboardError):
    """Raised by the spreadsheet client; always absorbed by the secondary adapter."""
