"""Data models for the Seance Tracker API."""

from .sessions import Session, SessionType
from .goals import (
    DaysBreakdown,
    Goal,
    GoalClosure,
    GoalProgress,
    GoalStatus,
    GoalType,
    NoActiveGoal,
)

__all__ = [
    "Session",
    "SessionType",
    "Goal",
    "GoalType",
    "GoalStatus",
    "GoalProgress",
    "GoalClosure",
    "DaysBreakdown",
    "NoActiveGoal",
]
