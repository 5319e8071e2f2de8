"""Workout session data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Optional
import uuid

from ..utils.dates import ensure_utc, to_iso, utc_now


class SessionType(IntEnum):
    """Activity performed during a session (wire value 1-3)."""
    RUNNING = 1
    CYCLING = 2
    STRENGTH = 3

    @property
    def label(self) -> str:
        """Human-readable activity name."""
        return self.name.capitalize()

    @property
    def key(self) -> str:
        """Lowercase key used in per-type statistics."""
        return self.name.lower()


@dataclass
class Session:
    """
    One logged workout ("seance").

    duration is in minutes, distance in meters.
    """
    id: str
    user_id: str
    type: SessionType
    duration: float
    distance: float = 0
    calories: float = 0
    date: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if isinstance(self.type, int) and not isinstance(self.type, SessionType):
            self.type = SessionType(self.type)
        self.date = ensure_utc(self.date)

    @classmethod
    def create(
        cls,
        user_id: str,
        type: SessionType,
        duration: float,
        distance: float = 0,
        calories: float = 0,
        date: Optional[datetime] = None,
    ) -> "Session":
        """Factory method to create a new session with auto-generated ID."""
        return cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=SessionType(type),
            duration=duration,
            distance=distance,
            calories=calories,
            date=date or utc_now(),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": int(self.type),
            "type_label": self.type.label,
            "duration": self.duration,
            "distance": self.distance,
            "calories": self.calories,
            "date": to_iso(self.date),
        }

