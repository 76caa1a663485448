"""
Leaderboard - Response Schemas

Field names serialize to camelCase to match the front-end contract
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LeaderboardEntry(_CamelModel):
    """Tickets credited to one referrer"""
    name: str
    tickets: int = Field(..., ge=1)


class DataSourceStats(_CamelModel):
    """Provenance counters from one reconciliation pass"""
    from_primary: int = 0        # All primary tickets (some may have updated referrers)
    only_in_secondary: int = 0   # Tickets contributed only by the spreadsheet
    referrers_updated: int = 0   # Primary tickets whose referrer the spreadsheet corrected


class LeaderboardResponse(_CamelModel):
    """
    Snapshot served by the engine.
    cache_age is only populated when the payload comes from the cache.
    """
    success: bool = True
    total_tickets: int
    leaderboard: list[LeaderboardEntry] = Field(default_factory=list)
    last_updated: datetime
    cached: bool = False
    cache_age: Optional[int] = None
    data_sources: DataSourceStats = Field(default_factory=DataSourceStats)

    def to_json(self) -> dict:
        """Serialize for the HTTP boundary (camelCase, cacheAge omitted when unset)"""
        payload = self.model_dump(mode="json", by_alias=True)
        if payload.get("cacheAge") is None:
            payload.pop("cacheAge", None)
        return payload


class ErrorResponse(BaseModel):
    """Failure body returned by the boundary"""
    success: bool = False
    error: str
