"""
Goal Service.

Manages the single active goal of each user and evaluates its progress.

A goal is Active until an evaluation runs after its end_date; that
evaluation closes it as achieved or not achieved. Closure is lazy (it
happens on read, or through the close-expired sweep) and is performed with
a conditional update so that it happens exactly once.
"""

import logging
import math
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from .statistics_service import round_half_up
from ..db.repositories.goal_repository import GoalRepository
from ..db.repositories.session_repository import SessionRepository
from ..exceptions import ActiveGoalExistsError, GoalNotFoundError, ValidationError
from ..models.goals import (
    DaysBreakdown,
    Goal,
    GoalClosure,
    GoalProgress,
    GoalType,
    NoActiveGoal,
)
from ..models.sessions import Session, SessionType
from ..utils.dates import parse_timestamp, utc_now
from ..utils.numbers import as_storable_number

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

ProgressResult = Union[NoActiveGoal, GoalProgress, GoalClosure]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_choice(value: Any, field: str, enum_cls, label: str, choices: str) -> None:
    if value is None:
        raise ValidationError(f"{label} is required", field=field)
    if not _is_number(value) or value not in {int(member) for member in enum_cls}:
        raise ValidationError(f"{label} must be {choices}", field=field)


def accumulate(sessions: Iterable[Session], goal_type: GoalType) -> float:
    """Sum the session metric a goal type is measured on."""
    metric = GoalType(goal_type).session_field
    return sum(getattr(session, metric) or 0 for session in sessions)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, rounded up."""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


class GoalService:
    """
    Service for goal lifecycle and progress evaluation.

    Args:
        goal_repository: Goal store (enforces one active goal per user)
        session_repository: Session store queried for progress
        clock: Returns the current aware UTC time; injectable for tests
    """

    def __init__(
        self,
        goal_repository: GoalRepository,
        session_repository: SessionRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._goals = goal_repository
        self._sessions = session_repository
        self._clock = clock or utc_now

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_goal(self, user_id: str, payload: Mapping[str, Any]) -> Goal:
        """
        Validate a goal definition and persist it as the user's active goal.

        Validation runs in field order and stops at the first failure, before
        any store access.

        Raises:
            ValidationError: If a field is missing or malformed
            ActiveGoalExistsError: If the user already has an active goal
        """
        seance_type = payload.get("seance_type")
        goal_type = payload.get("goal_type")
        goal_value = payload.get("goal_value")
        start_raw = payload.get("start_date")
        end_raw = payload.get("end_date")

        _validate_choice(
            seance_type, "seance_type", SessionType, "Session type",
            "1 (Running), 2 (Cycling), or 3 (Strength)",
        )
        _validate_choice(
            goal_type, "goal_type", GoalType, "Goal type",
            "1 (Distance), 2 (Duration), or 3 (Calories)",
        )

        if goal_value is None:
            raise ValidationError("Goal value is required", field="goal_value")
        goal_value = as_storable_number(goal_value)
        if goal_value is None or goal_value <= 0:
            raise ValidationError("Goal value must be a positive number", field="goal_value")

        if start_raw in (None, ""):
            raise ValidationError("Start date is required", field="start_date")
        if end_raw in (None, ""):
            raise ValidationError("End date is required", field="end_date")

        start_date = parse_timestamp(start_raw)
        if start_date is None:
            raise ValidationError("Invalid start date format", field="start_date")
        end_date = parse_timestamp(end_raw)
        if end_date is None:
            raise ValidationError("Invalid end date format", field="end_date")

        if end_date <= start_date:
            raise ValidationError("End date must be after start date", field="end_date")
        if end_date < self._clock():
            raise ValidationError("End date cannot be in the past", field="end_date")

        goal = Goal.create(
            user_id=user_id,
            seance_type=SessionType(int(seance_type)),
            goal_type=GoalType(int(goal_type)),
            goal_value=goal_value,
            start_date=start_date,
            end_date=end_date,
        )
        try:
            self._goals.create(goal)
        except ActiveGoalExistsError:
            logger.warning(f"User {user_id} tried to create a second active goal")
            raise
        logger.info(
            f"Created goal {goal.id} for user {user_id}: "
            f"{goal.goal_type.name.lower()} {goal.goal_value} "
            f"({goal.seance_type.label}) until {goal.end_date.isoformat()}"
        )
        return goal

    def get_active(self, user_id: str) -> Goal:
        """
        Raises:
            GoalNotFoundError: If the user has no active goal
        """
        goal = self._goals.find_active_by_owner(user_id)
        if goal is None:
            raise GoalNotFoundError(user_id)
        return goal

    def get_history(self, user_id: str) -> List[Goal]:
        """Closed goals of the user, most recently ended first."""
        return self._goals.find_closed_by_owner(user_id)

    def delete_active(self, user_id: str) -> None:
        """
        Raises:
            GoalNotFoundError: If the user has no active goal
        """
        if not self._goals.delete_active_by_owner(user_id):
            raise GoalNotFoundError(user_id)
        logger.info(f"Deleted active goal of user {user_id}")

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def check_progress(self, user_id: str) -> ProgressResult:
        """
        Evaluate the user's active goal.

        Returns:
            NoActiveGoal when there is nothing to check, GoalClosure when the
            goal period has ended (the goal is closed by this call or was
            closed concurrently), GoalProgress otherwise.
        """
        goal = self._goals.find_active_by_owner(user_id)
        if goal is None:
            return NoActiveGoal()

        now = self._clock()
        if goal.is_expired(now):
            return self._close(goal) or NoActiveGoal()
        return self._progress(goal, now)

    def find_expired(self, now: Optional[datetime] = None) -> List[Goal]:
        """Active goals past their end_date that no evaluation has closed yet."""
        return self._goals.find_expired_active(now or self._clock())

    def close_expired_goals(self, now: Optional[datetime] = None) -> int:
        """
        Close every active goal whose end_date has passed.

        Uses the same conditional close as check_progress, so it is safe to
        run alongside request handling.

        Returns:
            Number of goals closed by this sweep
        """
        now = now or self._clock()
        closed = 0
        for goal in self._goals.find_expired_active(now):
            if self._close(goal, record_only_own=True) is not None:
                closed += 1
        logger.info(f"Expired goal sweep closed {closed} goal(s)")
        return closed

    def _close(self, goal: Goal, record_only_own: bool = False) -> Optional[GoalClosure]:
        """Closing evaluation over [start_date, end_date]."""
        sessions = self._sessions.find_by_owner(
            goal.user_id,
            session_type=goal.seance_type,
            start=goal.start_date,
            end=goal.end_date,
        )
        total = accumulate(sessions, goal.goal_type)
        is_achieved = total >= goal.goal_value

        if self._goals.close_if_active(goal.id, is_achieved):
            goal.is_active = False
            goal.is_achieved = is_achieved
            logger.info(
                f"Closed goal {goal.id} of user {goal.user_id}: "
                f"{'achieved' if is_achieved else 'not achieved'} ({total}/{goal.goal_value})"
            )
            return GoalClosure(goal=goal, is_achieved=is_achieved, actual=total, target=goal.goal_value)

        if record_only_own:
            return None

        # Closed (or deleted) by a concurrent evaluation; report what was stored.
        stored = self._goals.get(goal.id)
        if stored is None:
            return None
        logger.debug(f"Goal {goal.id} was already closed by another evaluation")
        return GoalClosure(
            goal=stored,
            is_achieved=stored.is_achieved,
            actual=total,
            target=stored.goal_value,
        )

    def _progress(self, goal: Goal, now: datetime) -> GoalProgress:
        """Progress over [start_date, min(now, end_date)] for a goal still open."""
        window_end = min(now, goal.end_date)
        sessions = self._sessions.find_by_owner(
            goal.user_id,
            session_type=goal.seance_type,
            start=goal.start_date,
            end=window_end,
        )
        current = accumulate(sessions, goal.goal_type)

        total_days = days_between(goal.start_date, goal.end_date)
        remaining_days = days_between(now, goal.end_date)

        return GoalProgress(
            goal=goal,
            current=current,
            target=goal.goal_value,
            percentage=int(round_half_up(current / goal.goal_value * 100, 0)),
            days=DaysBreakdown(
                total=total_days,
                elapsed=total_days - remaining_days,
                remaining=remaining_days,
            ),
            is_completed=current >= goal.goal_value,
        )
