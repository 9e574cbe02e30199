"""Unit tests for the insight engine."""

import pytest

from app.analytics.insights import InsightEngine
from app.schemas.analytics import CategoryPerformance, KnowledgeGap, SessionStatistics
from tests.factories import make_buckets


def stats(length: int = 0, completion: int = 0, optimal=None) -> SessionStatistics:
    return SessionStatistics(
        total_sessions=1,
        average_session_length=length,
        completion_rate=completion,
        optimal_time_of_day=optimal,
    )


def category(name: str, total: int, mastery: int) -> CategoryPerformance:
    return CategoryPerformance(
        category=name,
        total=total,
        correct=round(total * mastery / 100),
        attempts=1,
        average_score=mastery,
        mastery_percentage=mastery,
    )


def active_days(active: int, total_days: int = 10, per_day: int = 5):
    return make_buckets([per_day] * active + [0] * (total_days - active))


@pytest.fixture
def engine() -> InsightEngine:
    return InsightEngine()


class TestLearningPatterns:
    """Tests for InsightEngine.learning_patterns."""

    def test_consistency_score(self, engine):
        """Test active days over total days."""
        patterns = engine.learning_patterns(active_days(8), stats())

        assert patterns.consistency_score == 80
        assert patterns.frequency_pattern == "frequent"

    @pytest.mark.parametrize("active,expected", [(0, "infrequent"), (3, "infrequent"), (4, "regular"), (7, "regular"), (8, "frequent")])
    def test_frequency_pattern(self, engine, active, expected):
        """Test frequency thresholds at 30% and 70% of days."""
        assert engine.learning_patterns(active_days(active), stats()).frequency_pattern == expected

    @pytest.mark.parametrize("length,expected", [(0, "short"), (10, "short"), (11, "medium"), (25, "medium"), (26, "long")])
    def test_session_length_preference(self, engine, length, expected):
        """Test session length buckets."""
        patterns = engine.learning_patterns(active_days(5), stats(length=length))

        assert patterns.session_length_preference == expected


class TestLearningVelocity:
    """Tests for InsightEngine.learning_velocity."""

    def test_no_activity(self, engine):
        """Test that an idle range is undetermined and stable."""
        velocity = engine.learning_velocity(make_buckets([0] * 10))

        assert velocity.speed == "undetermined"
        assert velocity.average_items_per_day == 0
        assert velocity.trend == "stable"

    def test_average_over_active_days_only(self, engine):
        """Test that idle days do not dilute the average."""
        velocity = engine.learning_velocity(make_buckets([5, 0, 0, 7, 0]))

        assert velocity.average_items_per_day == 6
        assert velocity.speed == "slow"

    @pytest.mark.parametrize("per_day,expected", [(9, "slow"), (10, "medium"), (30, "medium"), (31, "fast")])
    def test_speed(self, engine, per_day, expected):
        """Test speed thresholds."""
        assert engine.learning_velocity(make_buckets([per_day] * 3)).speed == expected

    @pytest.mark.parametrize("recent,expected", [(13, "improving"), (12, "stable"), (11, "stable"), (8, "stable"), (7, "declining")])
    def test_trend(self, engine, recent, expected):
        """Test recent week against the week before."""
        buckets = make_buckets([10] * 7 + [0, 0] + [recent] * 7)

        assert engine.learning_velocity(buckets).trend == expected

    def test_trend_needs_two_full_windows(self, engine):
        """Test that fewer than 14 active days stays stable."""
        buckets = make_buckets([1] * 6 + [100] * 7)

        assert engine.learning_velocity(buckets).trend == "stable"

    def test_trend_ratios_are_configurable(self):
        """Test custom trend ratios."""
        engine = InsightEngine(improving_ratio=1.05)
        buckets = make_buckets([10] * 7 + [11] * 7)

        assert engine.learning_velocity(buckets).trend == "improving"


class TestOptimalConditions:
    """Tests for InsightEngine.optimal_conditions."""

    def test_best_days_by_accuracy_then_volume(self, engine):
        """Test ranking of weekdays."""
        # Sun .. Sat starting 2024-03-03
        buckets = make_buckets(
            [0, 10, 20, 10, 0, 0, 0],
            [0, 9, 18, 10, 0, 0, 0],
        )

        conditions = engine.optimal_conditions(buckets, stats(length=18, optimal="09:00"))

        assert conditions.best_days == ["Wednesday", "Tuesday", "Monday"]
        assert conditions.optimal_time_of_day == "09:00"
        assert conditions.session_length == 18

    def test_groups_same_weekday_across_weeks(self, engine):
        """Test that two Mondays are pooled."""
        totals = [0] * 14
        correct = [0] * 14
        totals[1], correct[1] = 10, 10
        totals[8], correct[8] = 10, 0
        totals[2], correct[2] = 10, 6

        conditions = engine.optimal_conditions(make_buckets(totals, correct), stats())

        assert conditions.best_days[:2] == ["Tuesday", "Monday"]

    def test_no_optimal_time(self, engine):
        """Test that a missing optimal hour stays null."""
        conditions = engine.optimal_conditions(make_buckets([0] * 7), stats())

        assert conditions.optimal_time_of_day is None
        assert len(conditions.best_days) == 3


class TestStrengths:
    """Tests for InsightEngine.strengths."""

    def test_top_three_with_minimum_sample(self, engine):
        """Test that small categories are excluded and the rest ranked."""
        categories = [
            category("A", 10, 90),
            category("B", 4, 100),
            category("C", 5, 60),
            category("D", 20, 80),
            category("E", 6, 70),
        ]

        strengths = engine.strengths(categories)

        assert [s.category for s in strengths] == ["A", "D", "E"]
        assert strengths[0].total_questions == 10
        assert strengths[0].mastery_percentage == 90


class TestPersona:
    """Tests for InsightEngine.persona."""

    def test_dedicated_learner(self, engine):
        """Test high consistency with long sessions."""
        assert engine.persona(active_days(8), [], stats(length=21, completion=95)) == "Dedicated Learner"

    def test_curious_explorer(self, engine):
        """Test broad category coverage with volume."""
        buckets = active_days(2, per_day=60)
        categories = [category("grammar", 60, 50), category("vocabulary", 60, 50)]

        assert engine.persona(buckets, categories, stats(length=5)) == "Curious Explorer"

    def test_perfectionist(self, engine):
        """Test very high completion rate."""
        assert engine.persona(active_days(5), [], stats(length=20, completion=95)) == "Perfectionist"

    def test_intensive_studier(self, engine):
        """Test rare but long sessions."""
        assert engine.persona(active_days(2), [], stats(length=31, completion=50)) == "Intensive Studier"

    def test_quick_practicer(self, engine):
        """Test frequent short sessions."""
        assert engine.persona(active_days(6), [], stats(length=10, completion=50)) == "Quick Practicer"

    def test_casual_learner_fallback(self, engine):
        """Test the default persona."""
        assert engine.persona(active_days(4), [], stats(length=20, completion=50)) == "Casual Learner"

    def test_idle_learner_is_casual(self, engine):
        """Test that no activity falls through to the default."""
        assert engine.persona(make_buckets([0] * 31), [], SessionStatistics()) == "Casual Learner"

    def test_deterministic(self, engine):
        """Test that identical inputs give identical personas."""
        buckets = active_days(6)
        categories = [category("grammar", 12, 70)]

        results = {engine.persona(buckets, categories, stats(length=12)) for _ in range(5)}

        assert len(results) == 1


class TestBuild:
    """Tests for InsightEngine.build."""

    def test_limits_knowledge_gaps(self, engine):
        """Test that only the top five gaps are kept."""
        gaps = [KnowledgeGap(tag=f"tag-{i}", count=10 - i, percentage=10) for i in range(8)]

        insight = engine.build(active_days(5), gaps, [], stats(length=12))

        assert [g.tag for g in insight.knowledge_gaps] == ["tag-0", "tag-1", "tag-2", "tag-3", "tag-4"]
        assert insight.persona_type == "Casual Learner"
        assert insight.learning_patterns.consistency_score == 50
