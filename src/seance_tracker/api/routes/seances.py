"""Session ("seance") API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..deps import get_session_service
from ..middleware.auth import CurrentUser, get_current_user
from ..schemas import SessionCreateRequest, SessionUpdateRequest
from ...services.session_service import SessionService


router = APIRouter(prefix="/seances", tags=["seances"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> dict:
    """Log a workout session for the current user."""
    session = service.create(current_user.user_id, body.model_dump())
    return {"message": "Session created successfully", "seance": session.to_dict()}


@router.get("")
async def list_sessions(
    type: Optional[int] = Query(None, description="1 (Running), 2 (Cycling), 3 (Strength)"),
    start: Optional[str] = Query(None, alias="from", description="Inclusive lower date bound"),
    end: Optional[str] = Query(None, alias="to", description="Inclusive upper date bound"),
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> dict:
    """List the current user's sessions, newest first."""
    sessions = service.list(current_user.user_id, session_type=type, start=start, end=end)
    return {"seances": [s.to_dict() for s in sessions], "count": len(sessions)}


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> dict:
    session = service.get(current_user.user_id, session_id)
    return {"seance": session.to_dict()}


@router.patch("/{session_id}")
async def update_session(
    session_id: str,
    body: SessionUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> dict:
    """Update the supplied fields of a session."""
    session = service.update(
        current_user.user_id, session_id, body.model_dump(exclude_unset=True)
    )
    return {"message": "Session updated successfully", "seance": session.to_dict()}


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> dict:
    service.delete(current_user.user_id, session_id)
    return {"message": "Session deleted successfully"}
