"""Streak models maintained by the ingestion side."""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime, Index
from sqlalchemy.dialects.postgresql import UUID
import uuid

from app.core.database import Base


class UserMetrics(Base):
    """Running per-user counters, including the current streak."""
    __tablename__ = "user_metrics"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, unique=True, index=True)
    streak = Column(Integer, default=0)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)


class StreakHistory(Base):
    """Completed streaks."""
    __tablename__ = "user_streak_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    streak_length = Column(Integer, nullable=False)
    start_date = Column(Date)
    end_date = Column(Date)

    __table_args__ = (
        Index("ix_streak_history_user_length", "user_id", "streak_length"),
    )
