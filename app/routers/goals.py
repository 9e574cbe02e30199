"""Learning goal endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status

from app.analytics.analytics_engine import AnalyticsEngine
from app.core.dependencies import get_analytics_engine
from app.schemas.analytics import Goal, GoalInput

router = APIRouter()


@router.get("/{user_id}", response_model=List[Goal])
async def get_user_goals(
    user_id: str,
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Goals with progress computed at read time."""
    return await engine.get_user_goals(user_id)


@router.post("/{user_id}", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def save_user_goal(
    user_id: str,
    goal: GoalInput,
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """Create a goal, or replace an existing one when ``id`` is set."""
    return await engine.save_user_goal(user_id, goal)
