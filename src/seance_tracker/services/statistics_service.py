"""
Training Statistics Service.

Aggregates session records into totals and averages, over all sessions or
over a weekly/monthly window, compares two sessions and summarizes calories
per activity type.
"""

import calendar
import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..db.repositories.session_repository import SessionRepository
from ..exceptions import ForbiddenError, InvalidIdError, SessionNotFoundError, ValidationError
from ..models.sessions import Session, SessionType

logger = logging.getLogger(__name__)

# Last representable instant of a day at millisecond precision.
END_OF_DAY = time(23, 59, 59, 999000)


class WindowKind(str, Enum):
    """Time window used for windowed statistics."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def round_half_up(value: float, digits: int = 2) -> float:
    """Round half away from negative infinity, like Math.round on value * 10**digits."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def format_signed(value: Union[int, float]) -> str:
    """Format a difference with an explicit sign: +20, +0, -50."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"+{value}" if value >= 0 else str(value)


def signed_delta(a: Union[int, float], b: Union[int, float]) -> str:
    """Format b - a rounded to two decimals, half away from zero."""
    diff = b - a
    magnitude = round_half_up(abs(diff))
    return format_signed(magnitude if diff >= 0 else -magnitude)


def is_valid_id(value: Any) -> bool:
    """True if value is a well-formed session identifier (UUID string)."""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


@dataclass
class SessionStats:
    """Totals and averages over a set of sessions."""
    count: int = 0
    total_duration: float = 0
    total_distance: float = 0
    total_calories: float = 0
    avg_duration: float = 0
    avg_distance: float = 0
    avg_calories: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "totalDuration": self.total_duration,
            "totalDistance": self.total_distance,
            "totalCalories": self.total_calories,
            "avgDuration": self.avg_duration,
            "avgDistance": self.avg_distance,
            "avgCalories": self.avg_calories,
        }


@dataclass
class WindowedStats:
    """SessionStats for one weekly or monthly window."""
    kind: WindowKind
    start: datetime
    end: datetime
    stats: SessionStats

    def to_dict(self) -> Dict[str, Any]:
        result = self.stats.to_dict()
        result["window"] = {
            "kind": self.kind.value,
            "start": self.start.isoformat(timespec="milliseconds"),
            "end": self.end.isoformat(timespec="milliseconds"),
        }
        return result


@dataclass
class SessionComparison:
    """Two sessions and their signed differences (B - A)."""
    session_a: Session
    session_b: Session
    delta: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionA": self.session_a.to_dict(),
            "sessionB": self.session_b.to_dict(),
            "delta": dict(self.delta),
        }


@dataclass
class ActivityCalories:
    """Calorie totals for one activity type."""
    label: str
    total_calories: float = 0
    session_count: int = 0
    average_calories: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "totalCalories": self.total_calories,
            "sessionCount": self.session_count,
            "averageCalories": self.average_calories,
        }


@dataclass
class CaloriesByActivity:
    """Per-type calorie breakdown plus an overall summary."""
    by_type: Dict[SessionType, ActivityCalories]
    total_sessions: int
    total_calories_burned: float

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            session_type.key: entry.to_dict()
            for session_type, entry in self.by_type.items()
        }
        result["summary"] = {
            "totalSessions": self.total_sessions,
            "totalCaloriesBurned": self.total_calories_burned,
        }
        return result


def aggregate(sessions: Iterable[Session]) -> SessionStats:
    """
    Compute totals and 2-decimal averages over sessions.

    An empty input yields an all-zero result. Missing metrics count as 0.
    """
    sessions = list(sessions)
    if not sessions:
        return SessionStats()

    total_duration = sum(s.duration or 0 for s in sessions)
    total_distance = sum(s.distance or 0 for s in sessions)
    total_calories = sum(s.calories or 0 for s in sessions)
    count = len(sessions)

    return SessionStats(
        count=count,
        total_duration=total_duration,
        total_distance=total_distance,
        total_calories=total_calories,
        avg_duration=round_half_up(total_duration / count),
        avg_distance=round_half_up(total_distance / count),
        avg_calories=round_half_up(total_calories / count),
    )


def weekly_window(reference: datetime) -> Tuple[datetime, datetime]:
    """
    ISO week containing the reference day, in UTC.

    The calendar day of ``reference`` is shifted back to Monday
    (isoweekday: Monday=1 .. Sunday=7) and the window runs from Monday
    00:00:00.000 UTC to Sunday 23:59:59.999 UTC.
    """
    day = reference.date()
    monday = day - timedelta(days=day.isoweekday() - 1)
    sunday = monday + timedelta(days=6)
    start = datetime.combine(monday, time.min, tzinfo=timezone.utc)
    end = datetime.combine(sunday, END_OF_DAY, tzinfo=timezone.utc)
    return start, end


def monthly_window(reference: datetime) -> Tuple[datetime, datetime]:
    """
    Calendar month containing the reference, in local time.

    Aware references use their own timezone; naive references are taken as
    server-local time and each bound is resolved with its own UTC offset.
    """
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    start = datetime(reference.year, reference.month, 1)
    end = datetime.combine(start.replace(day=last_day), END_OF_DAY)

    if reference.tzinfo is None:
        return start.astimezone(), end.astimezone()
    return start.replace(tzinfo=reference.tzinfo), end.replace(tzinfo=reference.tzinfo)


def parse_reference_date(value: Optional[Union[str, datetime]]) -> datetime:
    """
    Parse the optional reference date of a windowed query.

    Missing values mean "now" in server-local time. Strings are ISO-8601;
    without an offset they are read as server-local time.

    Raises:
        ValidationError: If the string is not a valid date.
    """
    if value is None or value == "":
        return datetime.now()
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError("Invalid date format", field="date")


class StatisticsService:
    """
    Service for aggregate and comparison statistics over a user's sessions.
    """

    def __init__(self, session_repository: SessionRepository):
        self._sessions = session_repository

    def windowed_aggregate(
        self,
        user_id: str,
        reference_date: Optional[datetime] = None,
        window: WindowKind = WindowKind.WEEKLY,
    ) -> WindowedStats:
        """
        Aggregate the user's sessions within a weekly or monthly window.

        Args:
            user_id: Owner of the sessions
            reference_date: Any instant inside the wanted window (default: now)
            window: WindowKind.WEEKLY or WindowKind.MONTHLY

        Returns:
            WindowedStats with the window bounds and the aggregate
        """
        reference = reference_date if reference_date is not None else datetime.now()
        window = WindowKind(window)
        if window is WindowKind.WEEKLY:
            start, end = weekly_window(reference)
        else:
            start, end = monthly_window(reference)

        sessions = self._sessions.find_by_owner(user_id, start=start, end=end, ascending=True)
        logger.debug(
            f"{window.value} stats for user {user_id}: {len(sessions)} sessions "
            f"between {start.isoformat()} and {end.isoformat()}"
        )
        return WindowedStats(kind=window, start=start, end=end, stats=aggregate(sessions))

    def weekly(self, user_id: str, reference_date: Optional[datetime] = None) -> WindowedStats:
        return self.windowed_aggregate(user_id, reference_date, WindowKind.WEEKLY)

    def monthly(self, user_id: str, reference_date: Optional[datetime] = None) -> WindowedStats:
        return self.windowed_aggregate(user_id, reference_date, WindowKind.MONTHLY)

    def compare(self, user_id: str, session_a_id: str, session_b_id: str) -> SessionComparison:
        """
        Compare two of the user's sessions.

        Raises:
            ValidationError: If either ID is missing
            InvalidIdError: If either ID is not a well-formed identifier
            SessionNotFoundError: If either session does not exist
            ForbiddenError: If either session belongs to another user
        """
        if not session_a_id or not session_b_id:
            raise ValidationError("Both seance1 and seance2 IDs are required")

        for field_name, value in (("seance1", session_a_id), ("seance2", session_b_id)):
            if not is_valid_id(value):
                raise InvalidIdError(value, field=field_name)

        session_a = self._sessions.get(session_a_id)
        session_b = self._sessions.get(session_b_id)

        if session_a is None:
            raise SessionNotFoundError(session_a_id, message="One or both sessions not found")
        if session_b is None:
            raise SessionNotFoundError(session_b_id, message="One or both sessions not found")

        if session_a.user_id != user_id or session_b.user_id != user_id:
            logger.warning(f"User {user_id} tried to compare sessions they do not own")
            raise ForbiddenError("You don't have permission to compare these sessions")

        delta = {
            metric: signed_delta(getattr(session_a, metric), getattr(session_b, metric))
            for metric in ("duration", "distance", "calories")
        }
        return SessionComparison(session_a=session_a, session_b=session_b, delta=delta)

    def average_calories_by_type(self, user_id: str) -> CaloriesByActivity:
        """Average calories burned per activity type across all the user's sessions."""
        sessions = self._sessions.find_by_owner(user_id)

        by_type = {t: ActivityCalories(label=t.label) for t in SessionType}
        for session in sessions:
            entry = by_type[session.type]
            entry.total_calories += session.calories or 0
            entry.session_count += 1

        for entry in by_type.values():
            if entry.session_count > 0:
                entry.average_calories = round_half_up(entry.total_calories / entry.session_count)

        return CaloriesByActivity(
            by_type=by_type,
            total_sessions=len(sessions),
            total_calories_burned=sum(s.calories or 0 for s in sessions),
        )
