"""Account registration, login and token refresh backed by the users table."""

import logging
import uuid
from typing import Tuple

from .auth_service import MAX_PASSWORD_BYTES, AuthService, InvalidTokenError, TokenPair
from ..db.repositories.user_repository import User, UserRepository
from ..exceptions import InvalidCredentialsError, UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)


class AccountService:
    """Service for user accounts."""

    def __init__(self, user_repository: UserRepository, auth_service: AuthService):
        self._users = user_repository
        self._auth = auth_service

    def register(self, email: str, password: str, display_name: str | None = None) -> Tuple[User, TokenPair]:
        """
        Create an account and issue its first token pair.

        Raises:
            ValidationError: If email or password is missing, or the password is too long
            EmailAlreadyRegisteredError: If the email already has an account
        """
        if not email:
            raise ValidationError("Email is required", field="email")
        if not password:
            raise ValidationError("Password is required", field="password")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes", field="password"
            )

        user = self._users.create_user(
            user_id=str(uuid.uuid4()),
            email=email.strip().lower(),
            password_hash=self._auth.hash_password(password),
            display_name=display_name,
        )
        logger.info(f"Registered user {user.id}")
        return user, self._auth.create_token_pair(user.id, user.email)

    def login(self, email: str, password: str) -> Tuple[User, TokenPair]:
        """
        Raises:
            InvalidCredentialsError: Unknown email, wrong password or disabled account
        """
        user = self._users.get_by_email(email.strip()) if email else None
        if user is None or not user.is_active:
            raise InvalidCredentialsError()
        if not self._auth.verify_password(password or "", user.password_hash):
            logger.warning(f"Failed login for user {user.id}")
            raise InvalidCredentialsError()

        self._users.update_last_login(user.id)
        return user, self._auth.create_token_pair(user.id, user.email)

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            TokenExpiredError / InvalidTokenError: If the refresh token is unusable
            UnauthorizedError: If the account no longer exists
        """
        try:
            payload = self._auth.verify_refresh_token(refresh_token)
        except InvalidTokenError as e:
            logger.error(f"Invalid refresh token: {e.message}")
            raise InvalidTokenError("Invalid refresh token. Please log in again.")

        user = self._users.get_by_id(payload["sub"])
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found")
        return self._auth.create_token_pair(user.id, user.email)

    def me(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return user
