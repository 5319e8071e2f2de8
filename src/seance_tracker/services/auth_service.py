"""Authentication service for JWT token management and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from pydantic import BaseModel

from ..config import Settings, get_settings
from ..exceptions import UnauthorizedError

# bcrypt only hashes the first 72 bytes and newer releases refuse longer input.
MAX_PASSWORD_BYTES = 72


class TokenPair(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until access token expires


class TokenExpiredError(UnauthorizedError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message=message)


class InvalidTokenError(UnauthorizedError):
    """Raised when a token is malformed, forged or of the wrong type."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message=message)


class AuthService:
    """Service for handling authentication operations.

    Issues and verifies HS256 JWTs and hashes passwords with bcrypt.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._secret_key = settings.jwt_secret_key
        self._algorithm = settings.jwt_algorithm
        self._access_token_expire_minutes = settings.access_token_expire_minutes
        self._refresh_token_expire_days = settings.refresh_token_expire_days

    def create_access_token(self, user_id: str, email: str) -> str:
        """Create a JWT access token.

        Args:
            user_id: The user's unique identifier.
            email: The user's email address.

        Returns:
            Encoded JWT access token string.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "exp": now + timedelta(minutes=self._access_token_expire_minutes),
            "iat": now,
            "type": "access",
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def create_refresh_token(self, user_id: str) -> str:
        """Create a JWT refresh token."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "exp": now + timedelta(days=self._refresh_token_expire_days),
            "iat": now,
            "type": "refresh",
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def create_token_pair(self, user_id: str, email: str) -> TokenPair:
        """Create both access and refresh tokens."""
        return TokenPair(
            access_token=self.create_access_token(user_id, email),
            refresh_token=self.create_refresh_token(user_id),
            expires_in=self._access_token_expire_minutes * 60,
        )

    def verify_token(self, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Verify and decode a JWT token.

        Args:
            token: The JWT token string to verify.
            expected_type: Optional expected token type ("access" or "refresh").

        Returns:
            Decoded token payload as a dictionary.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or type mismatch.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        if expected_type and payload.get("type") != expected_type:
            raise InvalidTokenError(
                f"Expected token type '{expected_type}', got '{payload.get('type')}'"
            )
        if not payload.get("sub"):
            raise InvalidTokenError("Token has no subject")
        return payload

    def verify_access_token(self, token: str) -> dict[str, Any]:
        return self.verify_token(token, expected_type="access")

    def verify_refresh_token(self, token: str) -> dict[str, Any]:
        return self.verify_token(token, expected_type="refresh")

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Returns:
            True if the password matches, False otherwise (including
            malformed hashes).
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                hashed_password.encode("utf-8"),
            )
        except ValueError:
            return False


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get or create the auth service singleton."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
