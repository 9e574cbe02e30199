"""Value types for analytics inputs and outputs.

All models are frozen; an "update" produces a new instance via
``model_copy(update=...)``. Fields serialise in camelCase for the dashboard.
"""

from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class AnalyticsModel(BaseModel):
    """Immutable base model with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DateRange(AnalyticsModel):
    """Closed interval of UTC calendar days."""

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self):
        if self.end < self.start:
            raise ValueError("end date must not be before start date")
        return self

    @classmethod
    def last_days(cls, today: date, days: int) -> "DateRange":
        return cls(start=today - timedelta(days=days), end=today)

    @property
    def start_at(self) -> datetime:
        """Inclusive lower bound as an aware UTC datetime."""
        return datetime(self.start.year, self.start.month, self.start.day, tzinfo=timezone.utc)

    @property
    def end_before(self) -> datetime:
        """Exclusive upper bound: midnight after the last day."""
        last = self.end + timedelta(days=1)
        return datetime(last.year, last.month, last.day, tzinfo=timezone.utc)

    @property
    def day_count(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        for offset in range(self.day_count):
            yield self.start + timedelta(days=offset)


# Store records

class AttemptRecord(AnalyticsModel):
    """One completed question set. ``created_at`` is kept raw until bucketing."""

    user_id: str
    created_at: Any
    total_questions: int = 0
    correct_answers: int = 0
    score_percentage: float = 0.0
    time_spent: int = 0  # seconds
    content_type: Optional[str] = None
    id: Optional[str] = None


class ResponseRecord(AnalyticsModel):
    """One answer to a single question, joined with the question's tags."""

    user_id: str
    question_id: str
    is_correct: bool
    created_at: Any
    tags: Tuple[str, ...] = ()
    difficulty: Optional[str] = None


class StreakSnapshot(AnalyticsModel):
    """Externally maintained streak counter."""

    streak: int = 0
    updated_at: Optional[datetime] = None


# Derived outputs

class ActivityBucket(AnalyticsModel):
    date: date
    day: int  # 0 = Sunday
    total: int = 0
    correct: int = 0
    score: float = 0.0
    time_spent: int = 0
    attempts: int = 0


class HeatmapCell(AnalyticsModel):
    day: int
    hour: int
    value: int = 0
    day_name: str
    hour_formatted: str


class Session(AnalyticsModel):
    """Run of attempts with no gap above the session threshold."""

    attempts: Tuple[AttemptRecord, ...]
    started_at: datetime
    time_spent: int
    total_questions: int
    correct_answers: int
    average_score: float


class SessionStatistics(AnalyticsModel):
    total_sessions: int = 0
    average_session_length: int = 0
    average_questions_per_session: int = 0
    average_score_percentage: int = 0
    optimal_time_of_day: Optional[str] = None
    completion_rate: int = 0
    time_per_question: float = 0.0


class CategoryPerformance(AnalyticsModel):
    category: str
    total: int = 0
    correct: int = 0
    attempts: int = 0
    average_score: int = 0
    mastery_percentage: int = 0


class KnowledgeGap(AnalyticsModel):
    tag: str
    count: int
    difficulty: List[str] = Field(default_factory=list)
    percentage: int = 0


class GoalType(str, Enum):
    """Supported goal metrics."""
    QUESTIONS_ANSWERED = "questions_answered"
    MASTERY_SCORE = "mastery_score"
    STUDY_DAYS = "study_days"


class GoalInput(AnalyticsModel):
    """Payload for creating or updating a goal."""

    id: Optional[str] = None
    goal_type: GoalType
    target_value: float
    start_date: date
    end_date: Optional[date] = None
    title: str
    description: Optional[str] = None


class Goal(AnalyticsModel):
    id: Optional[str] = None
    user_id: str
    goal_type: GoalType
    target_value: float
    start_date: date
    end_date: Optional[date] = None
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    progress: int = 0


class StreakInfo(AnalyticsModel):
    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[datetime] = None


class LearningPatterns(AnalyticsModel):
    consistency_score: int
    session_length_preference: str
    frequency_pattern: str


class LearningVelocity(AnalyticsModel):
    speed: str
    average_items_per_day: int = 0
    trend: str = "stable"


class OptimalConditions(AnalyticsModel):
    optimal_time_of_day: Optional[str] = None
    best_days: List[str] = Field(default_factory=list)
    session_length: int = 0


class Strength(AnalyticsModel):
    category: str
    mastery_percentage: int
    total_questions: int


class Insight(AnalyticsModel):
    learning_patterns: LearningPatterns
    learning_velocity: LearningVelocity
    optimal_conditions: OptimalConditions
    knowledge_gaps: List[KnowledgeGap] = Field(default_factory=list)
    strengths: List[Strength] = Field(default_factory=list)
    persona_type: str


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Recommendation(AnalyticsModel):
    """A single study suggestion. Extras beyond priority depend on ``type``."""

    type: str
    focus: str
    reason: str
    priority: Priority
    difficulty: Optional[str] = None
    total_questions: Optional[int] = None
    suggestion: Optional[str] = None
    path_type: Optional[str] = None
    content_variety: Optional[str] = None
    session_length: Optional[str] = None
    content_length: Optional[str] = None
    frequency: Optional[str] = None
    best_days: Optional[List[str]] = None
    best_time: Optional[str] = None
