"""
Leaderboard Pipeline
Reconciles both ticket sources and ranks referrers

Components:
- reconciler.py: Primary-authoritative merge of Eventbrite and Google Sheets tickets
- leaderboard.py: Referrer ticket counts, sorted descending
- cache.py: Single-slot snapshot cache with bypass and single-flight refresh
- engine.py: LeaderboardEngine, the entry point used by the API
- run_pipeline.py: One-shot CLI runner
"""

from .cache import CachedSnapshot, SnapshotCache
from .engine import LeaderboardEngine, build_response
from .leaderboard import build_leaderboard, count_referrals
from .reconciler import ReconciliationResult, reconcile

__all__ = [
    "LeaderboardEngine",
    "build_response",
    "SnapshotCache",
    "CachedSnapshot",
    "reconcile",
    "ReconciliationResult",
    "build_leaderboard",
    "count_referrals",
]
