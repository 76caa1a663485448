"""
Leaderboard Engine
Entry point used by the API boundary: fetch -> reconcile -> aggregate, behind
the snapshot cache.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Sequence

import structlog

from services.ingest.adapters import PrimaryAdapter, SecondaryAdapter
from services.pipeline.cache import SnapshotCache
from services.pipeline.leaderboard import build_leaderboard
from services.pipeline.reconciler import reconcile
from shared.config import EngineConfig
from shared.schemas.leaderboard import LeaderboardResponse
from shared.schemas.ticket import NormalizedTicket

logger = structlog.get_logger()


class TicketFetcher(Protocol):
    async def fetch(self) -> list[NormalizedTicket]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_response(
    primary: Sequence[NormalizedTicket],
    secondary: Sequence[NormalizedTicket],
    last_updated: datetime,
) -> LeaderboardResponse:
    """Pure reconcile + aggregate step over already-fetched tickets"""
    result = reconcile(primary, secondary)
    return LeaderboardResponse(
        total_tickets=result.total_tickets,
        leaderboard=build_leaderboard(result.tickets.values()),
        last_updated=last_updated,
        cached=False,
        data_sources=result.stats(),
    )


class LeaderboardEngine:
    """
    Reconciliation engine with a process-local snapshot cache.

    Sources are built from config unless injected. A missing primary token
    is reported on every call, never at construction.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        primary: Optional[TicketFetcher] = None,
        secondary: Optional[TicketFetcher] = None,
        cache: Optional[SnapshotCache] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.config = config or EngineConfig.from_env()
        self.secondary = secondary or SecondaryAdapter.from_config(self.config)
        self.cache = cache or SnapshotCache(duration=self.config.cache_duration)
        self._primary = primary
        self._now = now

    def is_configured(self) -> bool:
        """Whether the primary-source token is set (liveness probe)"""
        return self.config.token_configured

    def cache_age(self) -> Optional[int]:
        return self.cache.age()

    async def get_tickets(self, bypass_cache: bool = False) -> LeaderboardResponse:
        """
        Return the leaderboard snapshot.

        Args:
            bypass_cache: Recompute even if the cached snapshot is fresh

        Raises:
            ConfigurationError: If the Eventbrite token is missing
            SourceFetchError: If any Eventbrite request fails
        """
        self.config.require_token()
        return await self.cache.get(self.run_pipeline, bypass=bypass_cache)

    async def run_pipeline(self) -> LeaderboardResponse:
        """Fetch both sources concurrently, then reconcile and aggregate"""
        primary = self._primary or PrimaryAdapter.from_config(self.config)

        primary_result, secondary_result = await asyncio.gather(
            primary.fetch(),
            self.secondary.fetch(),
            return_exceptions=True,
        )
        if isinstance(primary_result, BaseException):
            raise primary_result
        if isinstance(secondary_result, BaseException):
            logger.warning("Secondary source failed, continuing without it", error=str(secondary_result))
            secondary_result = []

        logger.info(
            "Fetched tickets",
            primary=len(primary_result),
            secondary=len(secondary_result),
        )
        response = build_response(primary_result, secondary_result, last_updated=self._now())
        logger.info(
            "Built leaderboard",
            total_tickets=response.total_tickets,
            referrers=len(response.leaderboard),
        )
        return response
