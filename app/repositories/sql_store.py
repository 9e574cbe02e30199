"""SQLAlchemy implementation of the analytics record store."""

import asyncio
from datetime import datetime
from functools import wraps
from typing import List, Optional
import uuid

from asyncpg import PostgresError
from sqlalchemy import select, and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
import structlog

from app.core.exceptions import StoreQueryError
from app.models.attempts import QuestionAttempt, QuestionResponse
from app.models.goals import UserGoal
from app.models.gamification import UserMetrics, StreakHistory
from app.repositories.store import AnalyticsStore
from app.schemas.analytics import (
    AttemptRecord,
    DateRange,
    Goal,
    ResponseRecord,
    StreakSnapshot,
)

logger = structlog.get_logger()

# Driver and network failures surface unwrapped when the pool first connects
STORE_ERRORS = (SQLAlchemyError, PostgresError, OSError, asyncio.TimeoutError)


def _store_operation(operation: str):
    """Translate database and connection failures into StoreQueryError."""
    def decorator(func_):
        @wraps(func_)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func_(self, *args, **kwargs)
            except STORE_ERRORS as e:
                logger.error("Store query failed", operation=operation, error=str(e))
                raise StoreQueryError(operation, str(e) or type(e).__name__) from e
        return wrapper
    return decorator


def _parse_goal_id(goal_id: Optional[str]) -> Optional[uuid.UUID]:
    if not goal_id:
        return None
    try:
        return uuid.UUID(goal_id)
    except ValueError:
        return None


def _attempt_record(row: QuestionAttempt) -> AttemptRecord:
    return AttemptRecord(
        id=str(row.id),
        user_id=row.user_id,
        created_at=row.created_at,
        total_questions=row.total_questions or 0,
        correct_answers=row.correct_answers or 0,
        score_percentage=row.score_percentage or 0.0,
        time_spent=row.time_spent or 0,
        content_type=row.content_type,
    )


def _goal(row: UserGoal) -> Goal:
    return Goal(
        id=str(row.id),
        user_id=row.user_id,
        goal_type=row.goal_type,
        target_value=row.target_value,
        start_date=row.start_date,
        end_date=row.end_date,
        title=row.title,
        description=row.description,
        created_at=row.created_at,
    )


class SqlAnalyticsStore(AnalyticsStore):
    """Record store backed by async SQLAlchemy sessions.

    Each operation opens its own session so that independent reads can run
    concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @_store_operation("query_attempts")
    async def query_attempts(self, user_id: str, date_range: DateRange) -> List[AttemptRecord]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(QuestionAttempt).where(
                    and_(
                        QuestionAttempt.user_id == user_id,
                        QuestionAttempt.created_at >= date_range.start_at,
                        QuestionAttempt.created_at < date_range.end_before
                    )
                ).order_by(QuestionAttempt.created_at)
            )
            return [_attempt_record(row) for row in result.scalars().all()]

    @_store_operation("query_attempts_between")
    async def query_attempts_between(self, user_id: str, start: datetime, end: datetime) -> List[AttemptRecord]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(QuestionAttempt).where(
                    and_(
                        QuestionAttempt.user_id == user_id,
                        QuestionAttempt.created_at.between(start, end)
                    )
                ).order_by(QuestionAttempt.created_at)
            )
            return [_attempt_record(row) for row in result.scalars().all()]

    @_store_operation("query_incorrect_responses")
    async def query_incorrect_responses(self, user_id: str, date_range: DateRange) -> List[ResponseRecord]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(QuestionResponse)
                .options(selectinload(QuestionResponse.question))
                .where(
                    and_(
                        QuestionResponse.user_id == user_id,
                        QuestionResponse.is_correct.is_(False),
                        QuestionResponse.created_at >= date_range.start_at,
                        QuestionResponse.created_at < date_range.end_before
                    )
                )
            )

            records = []
            for row in result.scalars().all():
                question = row.question
                tags = question.tags if question is not None and isinstance(question.tags, list) else []
                records.append(ResponseRecord(
                    user_id=row.user_id,
                    question_id=str(row.question_id),
                    is_correct=row.is_correct,
                    created_at=row.created_at,
                    tags=tuple(tags),
                    difficulty=question.difficulty if question is not None else None,
                ))
            return records

    @_store_operation("count_responses")
    async def count_responses(self, user_id: str, start: datetime, end: datetime) -> int:
        async with self.session_factory() as db:
            result = await db.execute(
                select(func.count(QuestionResponse.id)).where(
                    and_(
                        QuestionResponse.user_id == user_id,
                        QuestionResponse.created_at.between(start, end)
                    )
                )
            )
            return result.scalar() or 0

    @_store_operation("read_goals")
    async def read_goals(self, user_id: str) -> List[Goal]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(UserGoal)
                .where(UserGoal.user_id == user_id)
                .order_by(UserGoal.created_at.desc())
            )
            return [_goal(row) for row in result.scalars().all()]

    @_store_operation("write_goal")
    async def write_goal(self, goal: Goal) -> Goal:
        """Update the caller's goal with this id, otherwise insert a new one.

        Ids that do not parse or belong to another user get a fresh goal.
        """
        async with self.session_factory() as db:
            values = goal.model_dump(exclude={"id", "progress"})
            values["goal_type"] = goal.goal_type.value

            row = None
            goal_id = _parse_goal_id(goal.id)
            if goal_id is not None:
                result = await db.execute(
                    select(UserGoal).where(
                        and_(
                            UserGoal.id == goal_id,
                            UserGoal.user_id == goal.user_id
                        )
                    )
                )
                row = result.scalar_one_or_none()

            if row:
                values.pop("created_at")
                for key, value in values.items():
                    setattr(row, key, value)
            else:
                row = UserGoal(**values)
                db.add(row)

            await db.commit()
            await db.refresh(row)

            logger.info("Goal saved", user_id=goal.user_id, goal_id=str(row.id), goal_type=values["goal_type"])
            return _goal(row)

    @_store_operation("read_streak")
    async def read_streak(self, user_id: str) -> Optional[StreakSnapshot]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(UserMetrics).where(UserMetrics.user_id == user_id)
            )
            metrics = result.scalar_one_or_none()
            if metrics is None:
                return None
            return StreakSnapshot(streak=metrics.streak or 0, updated_at=metrics.updated_at)

    @_store_operation("read_best_historical_streak")
    async def read_best_historical_streak(self, user_id: str) -> Optional[int]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(StreakHistory.streak_length)
                .where(StreakHistory.user_id == user_id)
                .order_by(StreakHistory.streak_length.desc())
                .limit(1)
            )
            return result.scalar_one_or_none()
