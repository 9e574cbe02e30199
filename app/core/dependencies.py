"""Shared dependencies for Learner Analytics Service."""

from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException, Query
from pydantic import ValidationError
import structlog

from app.analytics.analytics_engine import AnalyticsEngine
from app.core.clock import Clock
from app.core.config import settings
from app.core.database import SessionLocal
from app.repositories.sql_store import SqlAnalyticsStore
from app.repositories.store import AnalyticsStore
from app.schemas.analytics import DateRange

logger = structlog.get_logger()

_clock = Clock()


def get_clock() -> Clock:
    """Get the UTC clock."""
    return _clock


def get_store() -> AnalyticsStore:
    """Get the SQL-backed record store."""
    return SqlAnalyticsStore(SessionLocal)


def get_analytics_engine(
    store: AnalyticsStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
) -> AnalyticsEngine:
    """Get a request-scoped analytics engine."""
    return AnalyticsEngine(store, clock=clock, config=settings)


def get_date_range(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    clock: Clock = Depends(get_clock)
) -> DateRange:
    """Resolve the requested range, defaulting to the trailing lookback window."""
    end = end_date or clock.today()
    start = start_date or DateRange.last_days(end, settings.DEFAULT_LOOKBACK_DAYS).start

    try:
        return DateRange(start=start, end=end)
    except ValidationError:
        raise HTTPException(
            status_code=422,
            detail="start_date must not be after end_date",
        )
