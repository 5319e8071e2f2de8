"""Statistics API routes.

Successful responses use the envelope {"success": true, "message", "data"}.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_statistics_service
from ..middleware.auth import CurrentUser, get_current_user
from ...services.statistics_service import StatisticsService, parse_reference_date


router = APIRouter(prefix="/statistics", tags=["statistics"])


def _envelope(message: str, data: Any) -> dict:
    return {"success": True, "message": message, "data": data}


@router.get("/weekly")
async def weekly_statistics(
    date: Optional[str] = Query(None, description="Any date inside the wanted week (ISO-8601)"),
    current_user: CurrentUser = Depends(get_current_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> dict:
    stats = service.weekly(current_user.user_id, parse_reference_date(date))
    return _envelope("Weekly statistics retrieved successfully", stats.to_dict())


@router.get("/monthly")
async def monthly_statistics(
    date: Optional[str] = Query(None, description="Any date inside the wanted month (ISO-8601)"),
    current_user: CurrentUser = Depends(get_current_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> dict:
    stats = service.monthly(current_user.user_id, parse_reference_date(date))
    return _envelope("Monthly statistics retrieved successfully", stats.to_dict())


@router.get("/compare")
async def compare_sessions(
    seance1: Optional[str] = Query(None),
    seance2: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> dict:
    """Compare two of the user's sessions; delta is seance2 - seance1."""
    comparison = service.compare(current_user.user_id, seance1, seance2)
    return _envelope("Sessions compared successfully", comparison.to_dict())


@router.get("/calories-by-activity")
async def calories_by_activity(
    current_user: CurrentUser = Depends(get_current_user),
    service: StatisticsService = Depends(get_statistics_service),
) -> dict:
    result = service.average_calories_by_type(current_user.user_id)
    return _envelope("Average calories by activity type retrieved successfully", result.to_dict())
