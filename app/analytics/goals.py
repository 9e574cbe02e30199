"""Goal progress calculation."""

from datetime import datetime, time, timezone
from typing import Sequence, Tuple

from app.analytics.records import with_timestamps
from app.analytics.rounding import clamp_percent
from app.core.clock import Clock
from app.repositories.store import AnalyticsStore
from app.schemas.analytics import AttemptRecord, Goal, GoalType


def progress_percent(value: float, target: float) -> int:
    """value / target as a whole percentage, capped at 100."""
    if target <= 0:
        return 0
    return clamp_percent(min(100.0, value / target * 100))


def mean_score(attempts: Sequence[AttemptRecord]) -> float:
    if not attempts:
        return 0.0
    return sum(a.score_percentage or 0.0 for a in attempts) / len(attempts)


def distinct_days(attempts: Sequence[AttemptRecord]) -> int:
    return len({timestamp.date() for _, timestamp in with_timestamps(attempts)})


class GoalProgressCalculator:
    """Computes percent-complete for stored goals on read."""

    def __init__(self, store: AnalyticsStore, clock: Clock):
        self.store = store
        self.clock = clock

    def window(self, goal: Goal) -> Tuple[datetime, datetime]:
        start = datetime.combine(goal.start_date, time.min, tzinfo=timezone.utc)
        if goal.end_date is not None:
            end = datetime.combine(goal.end_date, time.max, tzinfo=timezone.utc)
        else:
            end = self.clock.now()
        return start, end

    async def calculate(self, goal: Goal) -> Goal:
        """Return a copy of the goal with ``progress`` filled in."""
        start, end = self.window(goal)

        if goal.goal_type == GoalType.QUESTIONS_ANSWERED:
            answered = await self.store.count_responses(goal.user_id, start, end)
            progress = progress_percent(answered, goal.target_value)
        elif goal.goal_type == GoalType.MASTERY_SCORE:
            attempts = await self.store.query_attempts_between(goal.user_id, start, end)
            progress = progress_percent(mean_score(attempts), goal.target_value)
        else:  # study_days
            attempts = await self.store.query_attempts_between(goal.user_id, start, end)
            progress = progress_percent(distinct_days(attempts), goal.target_value)

        return goal.model_copy(update={"progress": progress})
