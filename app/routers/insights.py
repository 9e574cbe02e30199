"""Personalized insight and recommendation endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from app.analytics.analytics_engine import AnalyticsEngine
from app.core.dependencies import get_analytics_engine, get_date_range
from app.schemas.analytics import DateRange, Insight, Recommendation

router = APIRouter()


@router.get("/{user_id}", response_model=Insight)
async def get_personalized_insights(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Learning patterns, velocity, optimal conditions and persona."""
    return await engine.generate_personalized_insights(user_id, date_range)


@router.get(
    "/{user_id}/recommendations",
    response_model=List[Recommendation],
    response_model_exclude_none=True
)
async def get_study_recommendations(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Prioritized study recommendations."""
    return await engine.get_study_recommendations(user_id, date_range)


@router.get(
    "/{user_id}/content-recommendations",
    response_model=List[Recommendation],
    response_model_exclude_none=True
)
async def get_content_recommendations(
    user_id: str,
    date_range: DateRange = Depends(get_date_range),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Content suggestions derived from the learner's insights."""
    return await engine.generate_content_recommendations(user_id, date_range)
