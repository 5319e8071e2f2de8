"""
Session Service for workout logging.

Validates and stores the workout sessions ("seances") that feed goal
progress and the statistics endpoints. Every read and write is scoped to
the authenticated owner.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from .statistics_service import is_valid_id
from ..db.repositories.session_repository import SessionRepository
from ..exceptions import ForbiddenError, InvalidIdError, SessionNotFoundError, ValidationError
from ..models.sessions import Session, SessionType
from ..utils.dates import parse_timestamp, utc_now
from ..utils.numbers import as_storable_number

logger = logging.getLogger(__name__)

# (field, label, strictly positive)
_METRICS = (
    ("duration", "Duration", True),
    ("distance", "Distance", False),
    ("calories", "Calories", False),
)


def _validate_type(value: Any) -> SessionType:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value not in (1, 2, 3):
        raise ValidationError(
            "Type must be 1 (Running), 2 (Cycling), or 3 (Strength)", field="type"
        )
    return SessionType(int(value))


def _validate_metric(name: str, label: str, value: Any, positive: bool) -> float:
    value = as_storable_number(value)
    if value is None:
        raise ValidationError(f"{label} must be a number", field=name)
    if positive and value <= 0:
        raise ValidationError(f"{label} must be greater than 0", field=name)
    if not positive and value < 0:
        raise ValidationError(f"{label} must be greater than or equal to 0", field=name)
    return value


def _validate_date(value: Any) -> datetime:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValidationError("Invalid date format", field="date")
    return parsed


class SessionService:
    """Service for creating, reading, updating and deleting sessions."""

    def __init__(self, session_repository: SessionRepository):
        self._sessions = session_repository

    def create(self, user_id: str, payload: Mapping[str, Any]) -> Session:
        """
        Validate and store a new session for user_id.

        type, duration, distance and calories are required; date defaults
        to now.

        Raises:
            ValidationError: On the first missing or malformed field
        """
        if payload.get("type") is None:
            raise ValidationError("Type is required", field="type")
        session_type = _validate_type(payload["type"])

        values: Dict[str, float] = {}
        for name, label, positive in _METRICS:
            if payload.get(name) is None:
                verb = "are" if name == "calories" else "is"
                raise ValidationError(f"{label} {verb} required", field=name)
            values[name] = _validate_metric(name, label, payload[name], positive)

        date_value = payload.get("date")
        date = utc_now() if date_value in (None, "") else _validate_date(date_value)

        session = Session.create(user_id=user_id, type=session_type, date=date, **values)
        self._sessions.save(session)
        logger.info(f"Created {session.type.label.lower()} session {session.id} for user {user_id}")
        return session

    def get(self, user_id: str, session_id: str) -> Session:
        """
        Raises:
            InvalidIdError: If session_id is malformed
            SessionNotFoundError: If no such session exists
            ForbiddenError: If the session belongs to another user
        """
        if not is_valid_id(session_id):
            raise InvalidIdError(session_id, field="id", message="Invalid session ID")

        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if session.user_id != user_id:
            logger.warning(f"User {user_id} tried to access session {session_id}")
            raise ForbiddenError("You don't have permission to access this session")
        return session

    def list(
        self,
        user_id: str,
        session_type: Optional[int] = None,
        start: Optional[Any] = None,
        end: Optional[Any] = None,
    ) -> List[Session]:
        """The user's sessions, newest first, optionally filtered."""
        type_filter = None if session_type is None else _validate_type(session_type)
        start_date = None if start in (None, "") else _validate_date(start)
        end_date = None if end in (None, "") else _validate_date(end)

        return self._sessions.find_by_owner(
            user_id,
            session_type=type_filter,
            start=start_date,
            end=end_date,
            ascending=False,
        )

    def update(self, user_id: str, session_id: str, changes: Mapping[str, Any]) -> Session:
        """
        Apply a partial update; supplied fields follow the creation rules.
        """
        session = self.get(user_id, session_id)

        if changes.get("type") is not None:
            session.type = _validate_type(changes["type"])
        for name, label, positive in _METRICS:
            if changes.get(name) is not None:
                setattr(session, name, _validate_metric(name, label, changes[name], positive))
        if changes.get("date") not in (None, ""):
            session.date = _validate_date(changes["date"])

        self._sessions.save(session)
        logger.info(f"Updated session {session_id}")
        return session

    def delete(self, user_id: str, session_id: str) -> None:
        self.get(user_id, session_id)
        self._sessions.delete(session_id)
        logger.info(f"Deleted session {session_id} of user {user_id}")
