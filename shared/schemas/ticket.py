"""
Leaderboard - Ticket Schemas

Defines the canonical NormalizedTicket shared by both source adapters
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

NOT_APPLICABLE = "n/a"


class TicketSource(str, Enum):
    """Provenance of a normalized ticket"""
    PRIMARY = "primary"      # Eventbrite attendees API
    SECONDARY = "secondary"  # Google Sheets export


def clean_referrer(value: Optional[str]) -> Optional[str]:
    """Trim a referrer name; empty and "n/a" mean no referrer"""
    if value is None:
        return None
    value = str(value).strip()
    if not value or value.lower() == NOT_APPLICABLE:
        return None
    return value


class NormalizedTicket(BaseModel):
    """
    One attending ticket, in the shape both sources normalize to.
    Immutable once built; the reconciler produces updated copies.
    """
    # Identifiers
    event_id: Optional[str] = None
    order_id: Optional[str] = None  # None excludes the ticket from cross-source matching
    seat: Optional[str] = None

    # Attendee
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    # Attendance
    status: str
    referrer: Optional[str] = None
    source: TicketSource

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "event_id": "1849540227609",
                "order_id": "8812345671",
                "seat": "Orchestra C 12",
                "first_name": "Clara",
                "last_name": "Stahlbaum",
                "email": "clara@example.com",
                "status": "Attending",
                "referrer": "Dancer X",
                "source": "primary",
            }
        }

    @field_validator("referrer", mode="before")
    @classmethod
    def _normalize_referrer(cls, value: Optional[str]) -> Optional[str]:
        return clean_referrer(value)
