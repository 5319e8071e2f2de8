"""Rate limiting for the public auth endpoints.

Uses slowapi, keyed by user_id when authenticated and by client IP
otherwise.
"""

from typing import Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ...config import get_settings


def get_rate_limit_key(request: Request) -> str:
    """Get the rate limit key for a request (user_id or IP address)."""
    user: Optional[object] = getattr(request.state, "user", None)
    if user is not None:
        user_id = getattr(user, "user_id", None)
        if user_id:
            return f"user:{user_id}"

    return f"ip:{get_remote_address(request)}"


def register_limit() -> str:
    return get_settings().rate_limit_register


def login_limit() -> str:
    return get_settings().rate_limit_login


limiter = Limiter(
    key_func=get_rate_limit_key,
    enabled=get_settings().rate_limit_enabled,
)
