"""Analytics calculation and aggregation engine."""

import asyncio
from typing import List, Optional, Tuple

import structlog

from app.analytics.activity import ActivityAggregator, HeatmapBuilder
from app.analytics.goals import GoalProgressCalculator
from app.analytics.insights import InsightEngine
from app.analytics.performance import CategoryPerformanceAggregator, KnowledgeGapAnalyzer
from app.analytics.recommendations import RecommendationGenerator
from app.analytics.sessions import SessionSegmenter
from app.core.clock import Clock
from app.core.config import Settings, settings as default_settings
from app.gamification.streak_tracker import StreakTracker
from app.repositories.store import AnalyticsStore
from app.schemas.analytics import (
    ActivityBucket,
    CategoryPerformance,
    DateRange,
    Goal,
    GoalInput,
    HeatmapCell,
    Insight,
    KnowledgeGap,
    Recommendation,
    SessionStatistics,
    StreakInfo,
)

logger = structlog.get_logger()


class AnalyticsEngine:
    """Engine for calculating learner analytics from the record store.

    Each public method reads from the store and then aggregates in memory.
    Store failures surface as StoreQueryError and are never turned into
    partial results.
    """

    def __init__(
        self,
        store: AnalyticsStore,
        clock: Optional[Clock] = None,
        config: Optional[Settings] = None
    ):
        self.store = store
        self.clock = clock or Clock()
        self.config = config or default_settings

        self.activity = ActivityAggregator()
        self.heatmap = HeatmapBuilder()
        self.sessions = SessionSegmenter(
            gap_minutes=self.config.SESSION_GAP_MINUTES,
            optimal_hour_min_sessions=self.config.OPTIMAL_HOUR_MIN_SESSIONS,
        )
        self.categories = CategoryPerformanceAggregator()
        self.knowledge_gaps = KnowledgeGapAnalyzer()
        self.goals = GoalProgressCalculator(store, self.clock)
        self.streaks = StreakTracker(store)
        self.insights = InsightEngine(
            trend_window=self.config.TREND_WINDOW_DAYS,
            improving_ratio=self.config.TREND_IMPROVING_RATIO,
            declining_ratio=self.config.TREND_DECLINING_RATIO,
            strength_min_questions=self.config.STRENGTH_MIN_QUESTIONS,
            knowledge_gap_limit=self.config.KNOWLEDGE_GAP_INSIGHT_LIMIT,
        )
        self.recommendations = RecommendationGenerator(limit=self.config.RECOMMENDATION_LIMIT)

    def default_range(self) -> DateRange:
        """The trailing lookback window ending today (UTC)."""
        return DateRange.last_days(self.clock.today(), self.config.DEFAULT_LOOKBACK_DAYS)

    async def get_user_activity_data(self, user_id: str, date_range: Optional[DateRange] = None) -> List[ActivityBucket]:
        """One activity bucket per day of the range."""
        date_range = date_range or self.default_range()
        attempts = await self.store.query_attempts(user_id, date_range)
        return self.activity.build_buckets(attempts, date_range)

    async def get_activity_heatmap_data(self, user_id: str, date_range: Optional[DateRange] = None) -> List[HeatmapCell]:
        """Question volume by weekday and hour."""
        date_range = date_range or self.default_range()
        attempts = await self.store.query_attempts(user_id, date_range)
        return self.heatmap.build(attempts)

    async def get_performance_by_category(
        self,
        user_id: str,
        date_range: Optional[DateRange] = None
    ) -> List[CategoryPerformance]:
        date_range = date_range or self.default_range()
        attempts = await self.store.query_attempts(user_id, date_range)
        return self.categories.aggregate(attempts)

    async def get_knowledge_gaps(self, user_id: str, date_range: Optional[DateRange] = None) -> List[KnowledgeGap]:
        date_range = date_range or self.default_range()
        responses = await self.store.query_incorrect_responses(user_id, date_range)
        return self.knowledge_gaps.analyze(responses)

    async def get_session_statistics(self, user_id: str, date_range: Optional[DateRange] = None) -> SessionStatistics:
        date_range = date_range or self.default_range()
        attempts = await self.store.query_attempts(user_id, date_range)
        return self.sessions.statistics(attempts)

    async def get_user_streak(self, user_id: str) -> StreakInfo:
        return await self.streaks.get_streak(user_id)

    async def get_user_goals(self, user_id: str) -> List[Goal]:
        """Stored goals with progress computed now."""
        goals = await self.store.read_goals(user_id)
        if not goals:
            return []
        return list(await asyncio.gather(*(self.goals.calculate(goal) for goal in goals)))

    async def save_user_goal(self, user_id: str, goal_input: GoalInput) -> Goal:
        """Create a goal, or replace the stored goal when an id is given."""
        goal = Goal(
            id=goal_input.id,
            user_id=user_id,
            goal_type=goal_input.goal_type,
            target_value=goal_input.target_value,
            start_date=goal_input.start_date,
            end_date=goal_input.end_date,
            title=goal_input.title,
            description=goal_input.description,
            created_at=self.clock.now(),
        )
        saved = await self.store.write_goal(goal)
        return await self.goals.calculate(saved)

    async def _collect(
        self,
        user_id: str,
        date_range: DateRange
    ) -> Tuple[List[ActivityBucket], List[KnowledgeGap], List[CategoryPerformance], SessionStatistics]:
        # gather raises the first failure, so one failed read fails the whole call
        activity, gaps, categories, stats = await asyncio.gather(
            self.get_user_activity_data(user_id, date_range),
            self.get_knowledge_gaps(user_id, date_range),
            self.get_performance_by_category(user_id, date_range),
            self.get_session_statistics(user_id, date_range),
        )
        return activity, gaps, categories, stats

    async def generate_personalized_insights(self, user_id: str, date_range: Optional[DateRange] = None) -> Insight:
        """Persona, velocity and optimal conditions over the range."""
        date_range = date_range or self.default_range()
        activity, gaps, categories, stats = await self._collect(user_id, date_range)

        insight = self.insights.build(activity, gaps, categories, stats)

        logger.info(
            "Generated personalized insights",
            user_id=user_id,
            persona=insight.persona_type,
            days=date_range.day_count,
        )
        return insight

    async def get_study_recommendations(
        self,
        user_id: str,
        date_range: Optional[DateRange] = None
    ) -> List[Recommendation]:
        """Ranked study recommendations, capped at the configured limit."""
        date_range = date_range or self.default_range()
        activity, gaps, categories, stats = await self._collect(user_id, date_range)

        persona = self.insights.persona(activity, categories, stats)
        return self.recommendations.study(gaps, categories, persona)

    async def generate_content_recommendations(
        self,
        user_id: str,
        date_range: Optional[DateRange] = None
    ) -> List[Recommendation]:
        insight = await self.generate_personalized_insights(user_id, date_range)
        return self.recommendations.content(insight)
