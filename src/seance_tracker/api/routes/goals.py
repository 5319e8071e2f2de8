"""Goal API routes.

A user has at most one active goal. check-progress reports progress while
the goal is running and closes it on the first check after its end date.
"""

from fastapi import APIRouter, Depends, status

from ..deps import get_goal_service
from ..middleware.auth import CurrentUser, get_current_user
from ..schemas import GoalCreateRequest
from ...services.goal_service import GoalService


router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_goal(
    body: GoalCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> dict:
    """Create the current user's active goal."""
    goal = service.create_goal(current_user.user_id, body.model_dump())
    return {"message": "Goal created successfully", "goal": goal.to_dict()}


@router.get("/active")
async def get_active_goal(
    current_user: CurrentUser = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> dict:
    goal = service.get_active(current_user.user_id)
    return {"goal": goal.to_dict()}


@router.get("/history")
async def get_goal_history(
    current_user: CurrentUser = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> dict:
    """Closed goals, most recently ended first."""
    goals = service.get_history(current_user.user_id)
    return {"goals": [goal.to_dict() for goal in goals]}


@router.delete("/active")
async def delete_active_goal(
    current_user: CurrentUser = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> dict:
    service.delete_active(current_user.user_id)
    return {"message": "Goal deleted successfully"}


@router.get("/check-progress")
async def check_progress(
    current_user: CurrentUser = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> dict:
    """Evaluate the active goal; closes it if its period has ended."""
    return service.check_progress(current_user.user_id).to_dict()
