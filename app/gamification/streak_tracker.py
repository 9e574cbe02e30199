"""Streak lookup."""

import structlog

from app.repositories.store import AnalyticsStore
from app.schemas.analytics import StreakInfo

logger = structlog.get_logger()


class StreakTracker:
    """Reads the streak counter kept by the ingestion side.

    The current streak is not recomputed from attempts here; continuity
    rules live where activity is recorded.
    """

    def __init__(self, store: AnalyticsStore):
        self.store = store

    async def get_streak(self, user_id: str) -> StreakInfo:
        snapshot = await self.store.read_streak(user_id)
        if snapshot is None:
            logger.debug("No streak record", user_id=user_id)
            return StreakInfo()

        best = await self.store.read_best_historical_streak(user_id)

        return StreakInfo(
            current_streak=snapshot.streak,
            longest_streak=max(snapshot.streak, best or 0),
            last_active_date=snapshot.updated_at,
        )
