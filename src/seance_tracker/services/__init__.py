"""Business logic services."""

from .account_service import AccountService
from .auth_service import AuthService, TokenPair, get_auth_service
from .goal_service import GoalService
from .session_service import SessionService
from .statistics_service import StatisticsService, WindowKind

__all__ = [
    "AccountService",
    "AuthService",
    "TokenPair",
    "get_auth_service",
    "GoalService",
    "SessionService",
    "StatisticsService",
    "WindowKind",
]
