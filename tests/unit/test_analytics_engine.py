"""Unit tests for the analytics engine over an in-memory store."""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest

from app.analytics.analytics_engine import AnalyticsEngine
from app.core.exceptions import StoreQueryError
from app.schemas.analytics import DateRange, GoalInput, GoalType, StreakSnapshot
from tests.factories import USER_ID, InMemoryStore, at, make_attempt, make_response


@pytest.fixture
def engine(store, clock) -> AnalyticsEngine:
    return AnalyticsEngine(store, clock=clock)


class TestActivity:
    """Tests for activity and heatmap data."""

    @pytest.mark.asyncio
    async def test_default_range(self, engine):
        """Test the trailing 30-day window ending today."""
        buckets = await engine.get_user_activity_data(USER_ID)

        assert len(buckets) == 31
        assert buckets[0].date == date(2024, 2, 9)
        assert buckets[-1].date == date(2024, 3, 10)
        assert all(bucket.total == 0 for bucket in buckets)

    @pytest.mark.asyncio
    async def test_buckets_for_explicit_range(self, store, engine):
        """Test per-day totals and zero-filled days."""
        store.attempts = [
            make_attempt(at(4, 9), total=5, correct=4),
            make_attempt(at(4, 15), total=5, correct=3),
            make_attempt(at(6, 10), total=2, correct=2),
            make_attempt(at(4, 9), user_id="someone-else"),
        ]

        buckets = await engine.get_user_activity_data(USER_ID, DateRange(start=date(2024, 3, 4), end=date(2024, 3, 6)))

        assert [b.total for b in buckets] == [10, 0, 2]
        assert [b.correct for b in buckets] == [7, 0, 2]
        assert buckets[0].attempts == 2
        assert buckets[0].day == 1

    @pytest.mark.asyncio
    async def test_heatmap(self, store, engine):
        """Test the full grid with values in the right cells."""
        store.attempts = [make_attempt(at(4, 14), total=6), make_attempt(at(4, 14, 30), total=4)]

        cells = await engine.get_activity_heatmap_data(USER_ID)

        assert len(cells) == 168
        monday_two_pm = cells[1 * 24 + 14]
        assert monday_two_pm.value == 10
        assert monday_two_pm.day_name == "Mon"
        assert monday_two_pm.hour_formatted == "14:00"


class TestGoals:
    """Tests for goal persistence and progress."""

    @pytest.mark.asyncio
    async def test_save_and_read_goal(self, store, engine):
        """Test a saved goal comes back with progress."""
        store.responses = [make_response(["a"], created_at=at(4)) for _ in range(6)]
        goal_input = GoalInput(
            goal_type=GoalType.QUESTIONS_ANSWERED,
            target_value=10,
            start_date=date(2024, 3, 1),
            title="Answer ten questions",
        )

        saved = await engine.save_user_goal(USER_ID, goal_input)
        goals = await engine.get_user_goals(USER_ID)

        assert saved.id == "goal-1"
        assert saved.progress == 60
        assert saved.created_at == datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert [goal.progress for goal in goals] == [60]

    @pytest.mark.asyncio
    async def test_update_goal_by_id(self, store, engine):
        """Test saving with an existing id replaces the goal."""
        first = await engine.save_user_goal(USER_ID, GoalInput(
            goal_type=GoalType.STUDY_DAYS,
            target_value=4,
            start_date=date(2024, 3, 1),
            title="Study",
        ))

        await engine.save_user_goal(USER_ID, GoalInput(
            id=first.id,
            goal_type=GoalType.STUDY_DAYS,
            target_value=8,
            start_date=date(2024, 3, 1),
            title="Study more",
        ))

        goals = await engine.get_user_goals(USER_ID)
        assert len(goals) == 1
        assert goals[0].title == "Study more"
        assert goals[0].target_value == 8

    @pytest.mark.asyncio
    async def test_no_goals(self, engine):
        """Test an empty list for a learner without goals."""
        assert await engine.get_user_goals(USER_ID) == []


class TestStreak:
    """Tests for streak read-through."""

    @pytest.mark.asyncio
    async def test_streak(self, clock):
        """Test current and longest streak."""
        store = InMemoryStore(streak=StreakSnapshot(streak=4, updated_at=at(9)), best_streak=12)

        streak = await AnalyticsEngine(store, clock=clock).get_user_streak(USER_ID)

        assert streak.current_streak == 4
        assert streak.longest_streak == 12
        assert streak.last_active_date == at(9)


class TestInsights:
    """Tests for insights and recommendations."""

    @pytest.mark.asyncio
    async def test_insights_for_learner(self, store, engine):
        """Test an insight built from stored attempts and responses."""
        store.attempts = [
            make_attempt(at(4, 9), total=10, correct=8, time_spent=10),
            make_attempt(at(4, 9, 10), total=10, correct=9, time_spent=10),
            make_attempt(at(5, 9), total=10, correct=5, time_spent=10, content_type="vocabulary"),
        ]
        store.responses = [
            make_response(["subjunctive"]),
            make_response(["subjunctive", "articles"]),
            make_response(["articles"], is_correct=True),
        ]

        insight = await engine.generate_personalized_insights(USER_ID)

        assert insight.persona_type == "Casual Learner"
        assert insight.learning_patterns.frequency_pattern == "infrequent"
        assert insight.learning_velocity.average_items_per_day == 15
        assert insight.optimal_conditions.best_days[0] == "Monday"
        assert insight.optimal_conditions.optimal_time_of_day == "09:00"
        assert [gap.tag for gap in insight.knowledge_gaps] == ["subjunctive", "articles"]
        assert [s.category for s in insight.strengths] == ["grammar", "vocabulary"]

    @pytest.mark.asyncio
    async def test_no_data_recommendations(self, engine):
        """Test generic advice for a learner without history."""
        recommendations = await engine.get_study_recommendations(USER_ID)

        assert [r.focus for r in recommendations] == ["Diverse practice", "Spaced repetition"]

    @pytest.mark.asyncio
    async def test_content_recommendations(self, store, engine):
        """Test content suggestions follow the insight profile."""
        store.responses = [make_response(["subjunctive"], difficulty="hard")]

        recommendations = await engine.generate_content_recommendations(USER_ID)

        assert recommendations[0].focus == "subjunctive"
        assert recommendations[0].difficulty == "hard"
        assert "Consistent Weekly Schedule" in [r.focus for r in recommendations]

    @pytest.mark.asyncio
    async def test_store_failure_fails_whole_call(self, store, engine):
        """Test that one failed read fails insights rather than returning partial data."""
        store.query_incorrect_responses = AsyncMock(
            side_effect=StoreQueryError("query_incorrect_responses", "connection refused")
        )

        with pytest.raises(StoreQueryError) as exc_info:
            await engine.generate_personalized_insights(USER_ID)

        assert exc_info.value.operation == "query_incorrect_responses"

    @pytest.mark.asyncio
    async def test_store_failure_in_recommendations(self, store, engine):
        """Test that recommendations propagate store failures."""
        store.query_attempts = AsyncMock(side_effect=StoreQueryError("query_attempts"))

        with pytest.raises(StoreQueryError):
            await engine.get_study_recommendations(USER_ID)
