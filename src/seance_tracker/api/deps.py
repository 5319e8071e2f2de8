"""Dependency injection for API routes."""

from functools import lru_cache

from ..config import get_settings
from ..db.repositories.goal_repository import GoalRepository
from ..db.repositories.session_repository import SessionRepository
from ..db.repositories.user_repository import UserRepository
from ..services.account_service import AccountService
from ..services.auth_service import get_auth_service
from ..services.goal_service import GoalService
from ..services.session_service import SessionService
from ..services.statistics_service import StatisticsService


@lru_cache
def get_session_repository() -> SessionRepository:
    """Get the session repository instance."""
    settings = get_settings()
    return SessionRepository(settings.database_path, timeout=settings.database_timeout_sec)


@lru_cache
def get_goal_repository() -> GoalRepository:
    """Get the goal repository instance."""
    settings = get_settings()
    return GoalRepository(settings.database_path, timeout=settings.database_timeout_sec)


@lru_cache
def get_user_repository() -> UserRepository:
    """Get the user repository instance."""
    settings = get_settings()
    return UserRepository(settings.database_path, timeout=settings.database_timeout_sec)


@lru_cache
def get_session_service() -> SessionService:
    return SessionService(get_session_repository())


@lru_cache
def get_goal_service() -> GoalService:
    return GoalService(get_goal_repository(), get_session_repository())


@lru_cache
def get_statistics_service() -> StatisticsService:
    return StatisticsService(get_session_repository())


@lru_cache
def get_account_service() -> AccountService:
    return AccountService(get_user_repository(), get_auth_service())
