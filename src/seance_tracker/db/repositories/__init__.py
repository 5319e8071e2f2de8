"""Repository pattern implementations for database persistence.

SQLite repositories, one per entity, providing:
- Clean separation between business logic and data access
- Store-level enforcement of the one-active-goal-per-user rule
- Concurrent access safety through conditional writes
"""

from .base import SQLiteStore
from .session_repository import SessionRepository
from .goal_repository import GoalRepository
from .user_repository import User, UserRepository

__all__ = [
    "SQLiteStore",
    "SessionRepository",
    "GoalRepository",
    "User",
    "UserRepository",
]
