"""Data models for Learner Analytics Service."""

from app.models.attempts import QuestionAttempt, Question, QuestionResponse
from app.models.goals import UserGoal
from app.models.gamification import UserMetrics, StreakHistory

__all__ = [
    "QuestionAttempt",
    "Question",
    "QuestionResponse",
    "UserGoal",
    "UserMetrics",
    "StreakHistory"
]
