"""Request-level dependencies and middleware."""

from .auth import CurrentUser, get_current_user
from .rate_limit import limiter

__all__ = ["CurrentUser", "get_current_user", "limiter"]
