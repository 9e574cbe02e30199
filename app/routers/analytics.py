"""Learner activity and performance endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from app.analytics.analytics_engine import AnalyticsEngine
from app.core.dependencies import get_analytics_engine, get_date_range
from app.schemas.analytics import (
    ActivityBucket,
    CategoryPerformance,
    DateRange,
    HeatmapCell,
    KnowledgeGap,
    SessionStatistics,
    StreakInfo,
)

router = APIRouter()


@router.get("/{user_id}/activity", response_model=List[ActivityBucket])
async def get_user_activity(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Daily activity buckets for the range, zero-filled."""
    return await engine.get_user_activity_data(user_id, date_range)


@router.get("/{user_id}/heatmap", response_model=List[HeatmapCell])
async def get_activity_heatmap(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Question volume by weekday and hour (168 cells)."""
    return await engine.get_activity_heatmap_data(user_id, date_range)


@router.get("/{user_id}/categories", response_model=List[CategoryPerformance])
async def get_performance_by_category(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Mastery per content category."""
    return await engine.get_performance_by_category(user_id, date_range)


@router.get("/{user_id}/knowledge-gaps", response_model=List[KnowledgeGap])
async def get_knowledge_gaps(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Tags ranked by incorrect answers."""
    return await engine.get_knowledge_gaps(user_id, date_range)


@router.get("/{user_id}/sessions", response_model=SessionStatistics)
async def get_session_statistics(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Session statistics for the range."""
    return await engine.get_session_statistics(user_id, date_range)


@router.get("/{user_id}/streak", response_model=StreakInfo)
async def get_user_streak(
    user_id: str,
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Current and longest streak."""
    return await engine.get_user_streak(user_id)
