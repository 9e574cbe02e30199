"""Record store contract consumed by the analytics engine."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from app.schemas.analytics import (
    AttemptRecord,
    DateRange,
    Goal,
    ResponseRecord,
    StreakSnapshot,
)


class AnalyticsStore(ABC):
    """Read side of learner activity plus goal persistence.

    Implementations raise StoreQueryError when the backend fails; they never
    return partial results.
    """

    @abstractmethod
    async def query_attempts(self, user_id: str, date_range: DateRange) -> List[AttemptRecord]:
        """Attempts created within the range, oldest first."""

    @abstractmethod
    async def query_incorrect_responses(self, user_id: str, date_range: DateRange) -> List[ResponseRecord]:
        """Incorrect responses within the range, joined with question tags."""

    @abstractmethod
    async def count_responses(self, user_id: str, start: datetime, end: datetime) -> int:
        """Number of responses created in [start, end]."""

    @abstractmethod
    async def query_attempts_between(self, user_id: str, start: datetime, end: datetime) -> List[AttemptRecord]:
        """Attempts created in [start, end]; used for goal windows."""

    @abstractmethod
    async def read_goals(self, user_id: str) -> List[Goal]:
        """Stored goals, newest first."""

    @abstractmethod
    async def write_goal(self, goal: Goal) -> Goal:
        """Insert a goal without id or replace the stored goal with the same id."""

    @abstractmethod
    async def read_streak(self, user_id: str) -> Optional[StreakSnapshot]:
        """Current streak counter, or None if the user has none."""

    @abstractmethod
    async def read_best_historical_streak(self, user_id: str) -> Optional[int]:
        """Length of the longest completed streak, or None."""
