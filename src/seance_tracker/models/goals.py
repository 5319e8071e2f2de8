"""Goal data models and progress evaluation results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict
import uuid

from .sessions import SessionType
from ..utils.dates import ensure_utc, to_iso, utc_now


class GoalType(IntEnum):
    """Metric a goal is measured on (wire value 1-3)."""
    DISTANCE = 1
    DURATION = 2
    CALORIES = 3

    @property
    def session_field(self) -> str:
        """Session attribute accumulated for this goal type."""
        return self.name.lower()


class GoalStatus(str, Enum):
    """Lifecycle state of a goal."""
    ACTIVE = "active"
    ACHIEVED = "achieved"
    NOT_ACHIEVED = "not_achieved"


@dataclass
class Goal:
    """
    A target metric for one session type over [start_date, end_date].

    is_achieved is only meaningful once is_active is False.
    """
    id: str
    user_id: str
    seance_type: SessionType
    goal_type: GoalType
    goal_value: float
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    is_achieved: bool = False
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not isinstance(self.seance_type, SessionType):
            self.seance_type = SessionType(self.seance_type)
        if not isinstance(self.goal_type, GoalType):
            self.goal_type = GoalType(self.goal_type)
        self.start_date = ensure_utc(self.start_date)
        self.end_date = ensure_utc(self.end_date)
        self.created_at = ensure_utc(self.created_at)

    @classmethod
    def create(
        cls,
        user_id: str,
        seance_type: SessionType,
        goal_type: GoalType,
        goal_value: float,
        start_date: datetime,
        end_date: datetime,
    ) -> "Goal":
        """Factory method to create a new active goal with auto-generated ID."""
        return cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            seance_type=SessionType(seance_type),
            goal_type=GoalType(goal_type),
            goal_value=goal_value,
            start_date=start_date,
            end_date=end_date,
        )

    @property
    def status(self) -> GoalStatus:
        if self.is_active:
            return GoalStatus.ACTIVE
        return GoalStatus.ACHIEVED if self.is_achieved else GoalStatus.NOT_ACHIEVED

    def is_expired(self, now: datetime) -> bool:
        return now > self.end_date

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "seance_type": int(self.seance_type),
            "goal_type": int(self.goal_type),
            "goal_value": self.goal_value,
            "start_date": to_iso(self.start_date),
            "end_date": to_iso(self.end_date),
            "is_active": self.is_active,
            "is_achieved": self.is_achieved,
            "status": self.status.value,
            "created_at": to_iso(self.created_at),
        }


@dataclass
class DaysBreakdown:
    total: int
    elapsed: int
    remaining: int

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "elapsed": self.elapsed, "remaining": self.remaining}


@dataclass
class GoalProgress:
    """Progress of a goal that is still inside its window."""
    goal: Goal
    current: float
    target: float
    percentage: int
    days: DaysBreakdown
    is_completed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "goal": self.goal.to_dict(),
            "progress": {
                "current": self.current,
                "target": self.target,
                "percentage": self.percentage,
                "days": self.days.to_dict(),
                "isCompleted": self.is_completed,
            },
        }


@dataclass
class GoalClosure:
    """Outcome of the closing evaluation of an expired goal."""
    goal: Goal
    is_achieved: bool
    actual: float
    target: float
    message: str = "Goal period has ended"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "isAchieved": self.is_achieved,
            "actual": self.actual,
            "target": self.target,
            "goal": self.goal.to_dict(),
        }


@dataclass
class NoActiveGoal:
    message: str = "No active goal to check"

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}

