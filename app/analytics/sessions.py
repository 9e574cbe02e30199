"""Session segmentation and session statistics."""

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from app.analytics.records import with_timestamps
from app.analytics.rounding import clamp_percent, percentage, round_half_up, round_int
from app.core.clock import format_hour
from app.schemas.analytics import AttemptRecord, Session, SessionStatistics

DEFAULT_SESSION_GAP_MINUTES = 30
DEFAULT_OPTIMAL_HOUR_MIN_SESSIONS = 2


def _close_session(items: List[Tuple[AttemptRecord, datetime]]) -> Session:
    attempts = tuple(attempt for attempt, _ in items)
    return Session(
        attempts=attempts,
        started_at=items[0][1],
        time_spent=sum(a.time_spent or 0 for a in attempts),
        total_questions=sum(a.total_questions or 0 for a in attempts),
        correct_answers=sum(a.correct_answers or 0 for a in attempts),
        average_score=sum(a.score_percentage or 0.0 for a in attempts) / len(attempts),
    )


class SessionSegmenter:
    """Groups attempts into sessions separated by inactivity gaps."""

    def __init__(
        self,
        gap_minutes: float = DEFAULT_SESSION_GAP_MINUTES,
        optimal_hour_min_sessions: int = DEFAULT_OPTIMAL_HOUR_MIN_SESSIONS
    ):
        self.gap_minutes = gap_minutes
        self.optimal_hour_min_sessions = optimal_hour_min_sessions

    def segment(self, attempts: Sequence[AttemptRecord]) -> List[Session]:
        """Split attempts into sessions.

        Attempts are sorted by timestamp first. A gap strictly greater than
        ``gap_minutes`` since the previous attempt starts a new session.
        """
        ordered = sorted(with_timestamps(attempts), key=lambda item: item[1])
        if not ordered:
            return []

        sessions = []
        current = [ordered[0]]
        for previous, item in zip(ordered, ordered[1:]):
            gap = (item[1] - previous[1]).total_seconds() / 60
            if gap > self.gap_minutes:
                sessions.append(_close_session(current))
                current = [item]
            else:
                current.append(item)
        sessions.append(_close_session(current))

        return sessions

    def optimal_hour(self, sessions: Sequence[Session]) -> Optional[int]:
        """Hour of day whose sessions score best on average.

        Only hours with at least ``optimal_hour_min_sessions`` sessions count.
        Ties keep the earliest hour.
        """
        by_hour: Dict[int, List[float]] = defaultdict(list)
        for session in sessions:
            by_hour[session.started_at.hour].append(session.average_score)

        best_hour = None
        best_score = 0.0
        for hour in sorted(by_hour):
            scores = by_hour[hour]
            if len(scores) < self.optimal_hour_min_sessions:
                continue
            mean_score = sum(scores) / len(scores)
            if mean_score > best_score:
                best_score = mean_score
                best_hour = hour

        return best_hour

    def statistics(self, attempts: Sequence[AttemptRecord]) -> SessionStatistics:
        """Aggregate statistics over every session in the attempts."""
        sessions = self.segment(attempts)
        if not sessions:
            return SessionStatistics()

        count = len(sessions)
        total_time = sum(s.time_spent for s in sessions)
        total_questions = sum(s.total_questions for s in sessions)
        total_correct = sum(s.correct_answers for s in sessions)
        total_score = sum(s.average_score for s in sessions)

        hour = self.optimal_hour(sessions)

        return SessionStatistics(
            total_sessions=count,
            average_session_length=round_int(total_time / count),
            average_questions_per_session=round_int(total_questions / count),
            average_score_percentage=clamp_percent(total_score / count),
            optimal_time_of_day=format_hour(hour) if hour is not None else None,
            completion_rate=percentage(total_correct, total_questions),
            time_per_question=round_half_up(total_time / total_questions, 1) if total_questions > 0 else 0.0,
        )
