"""
Snapshot Cache
Single-slot, time-boxed cache in front of the leaderboard pipeline
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import structlog

from shared.schemas.leaderboard import LeaderboardResponse

logger = structlog.get_logger()

Refresher = Callable[[], Awaitable[LeaderboardResponse]]


@dataclass(frozen=True)
class CachedSnapshot:
    """One complete pipeline result and the clock reading when it was stored"""
    payload: LeaderboardResponse
    captured_at: float


class SnapshotCache:
    """
    Serves the last snapshot while it is fresh, otherwise runs the pipeline.

    States:
    - Fresh: a snapshot exists and its age is below the cache duration
    - Stale: no snapshot, the age reached the duration, or bypass was requested

    The snapshot is replaced by a single assignment, so readers only ever see
    a complete previous or new snapshot. A failed refresh keeps the old one.
    Callers arriving while a refresh is running await that same refresh.
    """

    def __init__(
        self,
        duration: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            duration: Freshness window in seconds
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self.duration = duration
        self._clock = clock
        self._snapshot: Optional[CachedSnapshot] = None
        self._inflight: Optional[asyncio.Future] = None

    @property
    def snapshot(self) -> Optional[CachedSnapshot]:
        return self._snapshot

    def age(self) -> Optional[int]:
        """Age of the current snapshot in whole seconds, or None"""
        snapshot = self._snapshot
        if snapshot is None:
            return None
        return int(self._clock() - snapshot.captured_at)

    def is_fresh(self) -> bool:
        snapshot = self._snapshot
        if snapshot is None:
            return False
        return self._clock() - snapshot.captured_at < self.duration

    async def get(self, refresh: Refresher, bypass: bool = False) -> LeaderboardResponse:
        """
        Return the cached payload or a freshly computed one.

        Args:
            refresh: Coroutine function running the full pipeline
            bypass: Force a refresh regardless of snapshot age

        Raises:
            Whatever refresh() raises; the stored snapshot is left untouched
        """
        snapshot = self._snapshot
        if snapshot is not None and not bypass:
            age = self._clock() - snapshot.captured_at
            if age < self.duration:
                logger.info("Returning cached data", cache_age=int(age))
                return snapshot.payload.model_copy(update={"cached": True, "cache_age": int(age)})

        logger.info("Fetching fresh data", bypass=bypass, had_snapshot=snapshot is not None)
        payload = await self._refresh(refresh)
        return payload.model_copy(update={"cached": False, "cache_age": None})

    async def _refresh(self, refresh: Refresher) -> LeaderboardResponse:
        task = self._inflight
        if task is None:
            task = self._inflight = asyncio.ensure_future(self._run_refresh(refresh))
        else:
            logger.debug("Joining in-flight refresh")
        # A cancelled caller must not cancel the refresh other callers await
        return await asyncio.shield(task)

    async def _run_refresh(self, refresh: Refresher) -> LeaderboardResponse:
        try:
            payload = await refresh()
            self._snapshot = CachedSnapshot(payload=payload, captured_at=self._clock())
            return payload
        finally:
            self._inflight = None
