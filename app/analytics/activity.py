"""Daily activity buckets and the day/hour heatmap."""

from collections import defaultdict
from typing import Dict, List, Sequence

from app.analytics.records import with_timestamps
from app.core.clock import DAY_ABBREVIATIONS, day_of_week, format_hour
from app.schemas.analytics import ActivityBucket, AttemptRecord, DateRange, HeatmapCell


class ActivityAggregator:
    """Buckets attempts into one record per UTC calendar day."""

    def build_buckets(self, attempts: Sequence[AttemptRecord], date_range: DateRange) -> List[ActivityBucket]:
        """One bucket for every day of the range, zero-filled and in order."""
        totals: Dict = defaultdict(lambda: {
            "total": 0,
            "correct": 0,
            "score": 0.0,
            "time_spent": 0,
            "attempts": 0,
        })

        for attempt, timestamp in with_timestamps(attempts):
            acc = totals[timestamp.date()]
            acc["total"] += attempt.total_questions or 0
            acc["correct"] += attempt.correct_answers or 0
            acc["score"] += attempt.score_percentage or 0.0
            acc["time_spent"] += attempt.time_spent or 0
            acc["attempts"] += 1

        # Days outside the range are dropped; missing days come back as zeros
        return [
            ActivityBucket(date=day, day=day_of_week(day), **totals.get(day, {}))
            for day in date_range.days()
        ]


class HeatmapBuilder:
    """Fixed 7 x 24 grid of question volume by weekday and hour."""

    def empty_grid(self) -> List[HeatmapCell]:
        return [
            HeatmapCell(
                day=day,
                hour=hour,
                value=0,
                day_name=DAY_ABBREVIATIONS[day],
                hour_formatted=format_hour(hour),
            )
            for day in range(7)
            for hour in range(24)
        ]

    def build(self, attempts: Sequence[AttemptRecord]) -> List[HeatmapCell]:
        values = [0] * (7 * 24)
        for attempt, timestamp in with_timestamps(attempts):
            index = day_of_week(timestamp.date()) * 24 + timestamp.hour
            values[index] += attempt.total_questions or 1

        return [
            cell.model_copy(update={"value": value}) if value else cell
            for cell, value in zip(self.empty_grid(), values)
        ]
