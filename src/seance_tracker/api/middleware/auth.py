"""Authentication dependency for FastAPI routes.

Resolves the bearer access token on each request to the owning user.
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...exceptions import UnauthorizedError
from ...services.auth_service import AuthService, get_auth_service


# Security scheme for Bearer token authentication
security = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Represents the currently authenticated user.

    Attributes:
        user_id: Unique identifier for the user.
        email: User's email address.
    """

    user_id: str
    email: str

    @property
    def id(self) -> str:
        """Alias for user_id."""
        return self.user_id


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    """FastAPI dependency to get the current authenticated user.

    Extracts the JWT from the Authorization header, validates it and
    returns a CurrentUser built from its claims. The user is also stored on
    request.state for the rate limiter key.

    Raises:
        UnauthorizedError: If no token is provided or the token is
            invalid or expired.
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    payload = auth_service.verify_access_token(credentials.credentials)

    user = CurrentUser(user_id=payload["sub"], email=payload.get("email", ""))
    request.state.user = user
    return user
