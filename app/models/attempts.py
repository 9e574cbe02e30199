"""Question attempt and response models."""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Float, DateTime, Boolean, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
import uuid

from app.core.database import Base


class QuestionAttempt(Base):
    """A completed set of questions."""
    __tablename__ = "question_attempts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    content_type = Column(String)
    total_questions = Column(Integer, default=0)
    correct_answers = Column(Integer, default=0)
    score_percentage = Column(Float, default=0.0)
    time_spent = Column(Integer, default=0)  # seconds
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    __table_args__ = (
        Index("ix_question_attempts_user_created", "user_id", "created_at"),
    )


class Question(Base):
    """Question metadata used for gap analysis."""
    __tablename__ = "questions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    question = Column(String, nullable=False)
    question_type = Column(String)
    content_id = Column(String)
    difficulty = Column(String)
    tags = Column(JSON, default=list)

    responses = relationship("QuestionResponse", back_populates="question")


class QuestionResponse(Base):
    """A single answer to a question."""
    __tablename__ = "question_responses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    question_id = Column(UUID(as_uuid=True), ForeignKey("questions.id"), nullable=False)
    is_correct = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    question = relationship("Question", back_populates="responses")

    __table_args__ = (
        Index("ix_question_responses_user_correct", "user_id", "is_correct", "created_at"),
    )
