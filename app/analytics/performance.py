"""Category mastery and knowledge-gap ranking."""

from typing import Dict, List, Sequence

from app.analytics.rounding import clamp_percent, percentage
from app.schemas.analytics import AttemptRecord, CategoryPerformance, KnowledgeGap, ResponseRecord

UNKNOWN_CATEGORY = "unknown"


class CategoryPerformanceAggregator:
    """Aggregates attempts by content type into mastery scores."""

    def aggregate(self, attempts: Sequence[AttemptRecord]) -> List[CategoryPerformance]:
        by_category: Dict[str, Dict] = {}

        for attempt in attempts:
            category = (attempt.content_type or "").strip() or UNKNOWN_CATEGORY
            acc = by_category.setdefault(category, {"total": 0, "correct": 0, "attempts": 0, "score": 0.0})
            acc["total"] += attempt.total_questions or 0
            acc["correct"] += attempt.correct_answers or 0
            acc["attempts"] += 1
            acc["score"] += attempt.score_percentage or 0.0

        return [
            CategoryPerformance(
                category=category,
                total=acc["total"],
                correct=acc["correct"],
                attempts=acc["attempts"],
                average_score=clamp_percent(acc["score"] / acc["attempts"]) if acc["attempts"] else 0,
                mastery_percentage=percentage(acc["correct"], acc["total"]),
            )
            for category, acc in by_category.items()
        ]


class KnowledgeGapAnalyzer:
    """Ranks question tags by how often they show up in wrong answers."""

    def analyze(self, responses: Sequence[ResponseRecord]) -> List[KnowledgeGap]:
        incorrect = [r for r in responses if not r.is_correct]
        if not incorrect:
            return []

        counts: Dict[str, int] = {}
        difficulties: Dict[str, List[str]] = {}

        for response in incorrect:
            # A tag repeated on one question still counts once
            for tag in dict.fromkeys(response.tags or ()):
                counts[tag] = counts.get(tag, 0) + 1
                seen = difficulties.setdefault(tag, [])
                if response.difficulty is not None and response.difficulty not in seen:
                    seen.append(response.difficulty)

        gaps = [
            KnowledgeGap(
                tag=tag,
                count=count,
                difficulty=difficulties[tag],
                percentage=percentage(count, len(incorrect)),
            )
            for tag, count in counts.items()
        ]
        return sorted(gaps, key=lambda gap: gap.count, reverse=True)
