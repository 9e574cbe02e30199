"""Learner persona and behavioural insight classification."""

import math
from typing import List, Sequence

import numpy as np

from app.analytics.rounding import percentage, round_int
from app.core.clock import DAY_NAMES
from app.schemas.analytics import (
    ActivityBucket,
    CategoryPerformance,
    Insight,
    KnowledgeGap,
    LearningPatterns,
    LearningVelocity,
    OptimalConditions,
    SessionStatistics,
    Strength,
)

DEDICATED_LEARNER = "Dedicated Learner"
CURIOUS_EXPLORER = "Curious Explorer"
PERFECTIONIST = "Perfectionist"
INTENSIVE_STUDIER = "Intensive Studier"
QUICK_PRACTICER = "Quick Practicer"
CASUAL_LEARNER = "Casual Learner"


def _active(buckets: Sequence[ActivityBucket]) -> List[ActivityBucket]:
    return [bucket for bucket in buckets if bucket.total > 0]


class InsightEngine:
    """Derives patterns, velocity, optimal conditions and persona from aggregates.

    Every method is a pure function of its arguments.
    """

    def __init__(
        self,
        trend_window: int = 7,
        improving_ratio: float = 1.2,
        declining_ratio: float = 0.8,
        strength_min_questions: int = 5,
        knowledge_gap_limit: int = 5
    ):
        self.trend_window = trend_window
        self.improving_ratio = improving_ratio
        self.declining_ratio = declining_ratio
        self.strength_min_questions = strength_min_questions
        self.knowledge_gap_limit = knowledge_gap_limit

    def learning_patterns(self, buckets: Sequence[ActivityBucket], stats: SessionStatistics) -> LearningPatterns:
        active_days = len(_active(buckets))
        total_days = len(buckets)

        length = stats.average_session_length
        if length <= 10:
            preference = "short"
        elif length <= 25:
            preference = "medium"
        else:
            preference = "long"

        if active_days <= math.floor(total_days * 0.3):
            frequency = "infrequent"
        elif active_days <= math.floor(total_days * 0.7):
            frequency = "regular"
        else:
            frequency = "frequent"

        return LearningPatterns(
            consistency_score=percentage(active_days, total_days),
            session_length_preference=preference,
            frequency_pattern=frequency,
        )

    def learning_velocity(self, buckets: Sequence[ActivityBucket]) -> LearningVelocity:
        totals = [bucket.total for bucket in _active(buckets)]
        if not totals:
            return LearningVelocity(speed="undetermined", average_items_per_day=0, trend="stable")

        average = float(np.mean(totals))
        if average < 10:
            speed = "slow"
        elif average > 30:
            speed = "fast"
        else:
            speed = "medium"

        return LearningVelocity(
            speed=speed,
            average_items_per_day=round_int(average),
            trend=self.trend(totals),
        )

    def trend(self, active_totals: Sequence[int]) -> str:
        """Compare the latest window of active days with the one before it.

        Both windows must be full; otherwise the trend is "stable".
        """
        window = self.trend_window
        if len(active_totals) < 2 * window:
            return "stable"

        recent = float(np.mean(active_totals[-window:]))
        older = float(np.mean(active_totals[-2 * window:-window]))

        if recent > older * self.improving_ratio:
            return "improving"
        if recent < older * self.declining_ratio:
            return "declining"
        return "stable"

    def optimal_conditions(self, buckets: Sequence[ActivityBucket], stats: SessionStatistics) -> OptimalConditions:
        day_stats = []
        for day_number, day_name in enumerate(DAY_NAMES):
            days = [bucket for bucket in buckets if bucket.day == day_number]
            total = sum(bucket.total for bucket in days)
            correct = sum(bucket.correct for bucket in days)
            day_stats.append((day_name, percentage(correct, total), total))

        # Accuracy first, question volume breaks ties
        ranked = sorted(day_stats, key=lambda stat: (-stat[1], -stat[2]))

        return OptimalConditions(
            optimal_time_of_day=stats.optimal_time_of_day,
            best_days=[name for name, _, _ in ranked[:3]],
            session_length=stats.average_session_length,
        )

    def strengths(self, categories: Sequence[CategoryPerformance]) -> List[Strength]:
        qualified = [c for c in categories if c.total >= self.strength_min_questions]
        ranked = sorted(qualified, key=lambda c: c.mastery_percentage, reverse=True)
        return [
            Strength(
                category=c.category,
                mastery_percentage=c.mastery_percentage,
                total_questions=c.total,
            )
            for c in ranked[:3]
        ]

    def persona(
        self,
        buckets: Sequence[ActivityBucket],
        categories: Sequence[CategoryPerformance],
        stats: SessionStatistics
    ) -> str:
        """First matching rule wins."""
        active_days = len(_active(buckets))
        total_days = len(buckets)
        consistency = active_days / total_days * 100 if total_days else 0.0

        total_questions = sum(bucket.total for bucket in buckets)
        sampled = sum(1 for c in categories if c.total >= 3)
        variety = len(categories) / max(1, sampled)

        length = stats.average_session_length

        if consistency > 70 and length > 20:
            return DEDICATED_LEARNER
        if variety > 0.8 and total_questions > 100:
            return CURIOUS_EXPLORER
        if stats.completion_rate > 90:
            return PERFECTIONIST
        if active_days < total_days * 0.3 and length > 30:
            return INTENSIVE_STUDIER
        if consistency > 50 and length < 15:
            return QUICK_PRACTICER
        return CASUAL_LEARNER

    def build(
        self,
        buckets: Sequence[ActivityBucket],
        gaps: Sequence[KnowledgeGap],
        categories: Sequence[CategoryPerformance],
        stats: SessionStatistics
    ) -> Insight:
        return Insight(
            learning_patterns=self.learning_patterns(buckets, stats),
            learning_velocity=self.learning_velocity(buckets),
            optimal_conditions=self.optimal_conditions(buckets, stats),
            knowledge_gaps=list(gaps[:self.knowledge_gap_limit]),
            strengths=self.strengths(categories),
            persona_type=self.persona(buckets, categories, stats),
        )
