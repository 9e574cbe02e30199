"""Study and content recommendations."""

from typing import List, Optional, Sequence

from app.analytics.insights import CURIOUS_EXPLORER, DEDICATED_LEARNER, QUICK_PRACTICER
from app.schemas.analytics import CategoryPerformance, Insight, KnowledgeGap, Priority, Recommendation

MIN_RECOMMENDATIONS = 3

FALLBACK_RECOMMENDATIONS = [
    Recommendation(
        type="general",
        focus="Diverse practice",
        reason="Regular practice across different topics improves retention",
        priority=Priority.LOW,
        suggestion="Try practicing different question types each day",
    ),
    Recommendation(
        type="general",
        focus="Spaced repetition",
        reason="Reviewing content at increasing intervals improves long-term memory",
        priority=Priority.MEDIUM,
        suggestion="Review previously mastered content once a week",
    ),
]

PERSONA_RECOMMENDATIONS = {
    DEDICATED_LEARNER: Recommendation(
        type="learning_path",
        focus="Advanced Study Path",
        reason="Structured advanced content for dedicated learners",
        priority=Priority.MEDIUM,
        path_type="comprehensive",
    ),
    CURIOUS_EXPLORER: Recommendation(
        type="content_variety",
        focus="Diverse Content Topics",
        reason="Explore a variety of new topics matching your curious nature",
        priority=Priority.MEDIUM,
        content_variety="high",
    ),
    QUICK_PRACTICER: Recommendation(
        type="session_type",
        focus="Daily Micro-Practice",
        reason="Short, focused practice sessions that fit your style",
        priority=Priority.HIGH,
        session_length="very_short",
    ),
}


class RecommendationGenerator:
    """Builds capped, ordered recommendation lists."""

    def __init__(self, limit: int = 5):
        self.limit = limit

    def persona_recommendation(self, persona_type: str) -> Optional[Recommendation]:
        return PERSONA_RECOMMENDATIONS.get(persona_type)

    def study(
        self,
        gaps: Sequence[KnowledgeGap],
        categories: Sequence[CategoryPerformance],
        persona_type: str
    ) -> List[Recommendation]:
        """Gaps, then weak categories, then persona, then generic fallbacks."""
        recommendations = [
            Recommendation(
                type="knowledge_gap",
                focus=gap.tag,
                reason=f"You've struggled with {gap.tag} ({gap.percentage}% of incorrect answers)",
                priority=Priority.HIGH if gap.count > 5 else Priority.MEDIUM,
                difficulty=", ".join(gap.difficulty),
            )
            for gap in gaps[:3]
        ]

        weak = sorted(
            (c for c in categories if c.mastery_percentage < 70 and c.total >= 5),
            key=lambda c: c.mastery_percentage,
        )
        for category in weak[:2]:
            recommendations.append(Recommendation(
                type="category_performance",
                focus=category.category,
                reason=f"Your mastery in {category.category} is {category.mastery_percentage}%",
                priority=Priority.HIGH if category.mastery_percentage < 50 else Priority.MEDIUM,
                total_questions=category.total,
            ))

        persona = self.persona_recommendation(persona_type)
        if persona is not None:
            recommendations.append(persona)

        for fallback in FALLBACK_RECOMMENDATIONS:
            if len(recommendations) >= MIN_RECOMMENDATIONS:
                break
            recommendations.append(fallback)

        return recommendations[:self.limit]

    def content(self, insight: Insight) -> List[Recommendation]:
        """Content suggestions tailored to a learner's insight profile."""
        recommendations = [
            Recommendation(
                type="knowledge_gap",
                focus=gap.tag,
                reason=f"Fill your knowledge gap in {gap.tag}",
                priority=Priority.HIGH if gap.count > 10 else Priority.MEDIUM,
                difficulty=gap.difficulty[0] if gap.difficulty else "intermediate",
            )
            for gap in insight.knowledge_gaps
        ]

        patterns = insight.learning_patterns
        if patterns.session_length_preference == "short":
            recommendations.append(Recommendation(
                type="session_type",
                focus="Quick Review Sessions",
                reason="Matches your preference for shorter study sessions",
                priority=Priority.MEDIUM,
                content_length="short",
            ))
        if patterns.frequency_pattern == "infrequent":
            recommendations.append(Recommendation(
                type="schedule",
                focus="Consistent Weekly Schedule",
                reason="Helps build a more regular study habit",
                priority=Priority.HIGH,
                frequency="scheduled",
            ))

        conditions = insight.optimal_conditions
        if conditions.best_days:
            recommendations.append(Recommendation(
                type="optimal_time",
                focus="Optimal Study Schedule",
                reason=f"You perform best on {', '.join(conditions.best_days)}",
                priority=Priority.MEDIUM,
                best_days=list(conditions.best_days),
                best_time=conditions.optimal_time_of_day,
            ))

        persona = self.persona_recommendation(insight.persona_type)
        if persona is not None:
            recommendations.append(persona)

        return recommendations[:self.limit]
