"""
Leaderboard Normalize Service
Converts raw source records to the canonical NormalizedTicket format

Components:
- normalizer.py: AttendeeNormalizer (Eventbrite) and SheetRowNormalizer (Google Sheets)
"""

from .normalizer import (
    AttendeeNormalizer,
    RowOutcome,
    SheetRow,
    SheetRowNormalizer,
    normalize_attendees,
    normalize_sheet_rows,
)

__all__ = [
    "AttendeeNormalizer",
    "SheetRowNormalizer",
    "SheetRow",
    "RowOutcome",
    "normalize_attendees",
    "normalize_sheet_rows",
]
