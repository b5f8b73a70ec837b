"""Summary statistics endpoint."""

from fastapi import APIRouter

from task_tracker_api.app.schemas.statistics import StatsRead
from task_tracker_api.app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("", response_model=StatsRead)
async def get_stats() -> StatsRead:
    """Return user and task totals and the completion rate."""
    return await StatisticsService.summary()
