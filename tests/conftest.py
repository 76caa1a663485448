"""Pytest configuration and shared fixtures for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shared.schemas.ticket import NormalizedTicket, TicketSource  # noqa: E402


def make_ticket(
    order_id: Optional[str],
    referrer: Optional[str] = None,
    source: TicketSource = TicketSource.PRIMARY,
    seat: Optional[str] = None,
    status: str = "Attending",
) -> NormalizedTicket:
    """Build a ticket with only the fields the engine looks at."""
    return NormalizedTicket(
        order_id=order_id,
        referrer=referrer,
        source=source,
        seat=seat,
        status=status,
    )


@pytest.fixture
def ticket_factory():
    """Expose make_ticket to tests as a fixture."""
    return make_ticket


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
