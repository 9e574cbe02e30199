"""Learning goal models."""

from datetime import datetime
from sqlalchemy import Column, String, Float, Date, DateTime, Index
from sqlalchemy.dialects.postgresql import UUID
import uuid

from app.core.database import Base


class UserGoal(Base):
    """Stored learning goal. Progress is computed on read."""
    __tablename__ = "user_goals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    goal_type = Column(String, nullable=False)  # questions_answered, mastery_score, study_days
    target_value = Column(Float, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    title = Column(String, nullable=False)
    description = Column(String)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    __table_args__ = (
        Index("ix_user_goals_user_created", "user_id", "created_at"),
    )
