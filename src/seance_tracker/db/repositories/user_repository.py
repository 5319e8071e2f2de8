"""SQLite-backed repository for user accounts.

Provides the account operations needed by registration, login and token
resolution.
"""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .base import SQLiteStore
from ...exceptions import EmailAlreadyRegisteredError
from ...utils.dates import from_storage, to_storage, utc_now


@dataclass
class User:
    """User entity representing an account holder."""

    id: str
    email: str
    password_hash: str
    display_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


class UserRepository(SQLiteStore):
    """SQLite-backed repository for User entities."""

    def _ensure_table_exists(self):
        """Ensure the users table exists."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT UNIQUE NOT NULL COLLATE NOCASE,
                    password_hash TEXT NOT NULL,
                    display_name TEXT,
                    is_active INTEGER DEFAULT 1,
                    created_at TEXT NOT NULL,
                    last_login_at TEXT
                )
            """)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        """Convert a database row to a User entity."""
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            display_name=row["display_name"],
            is_active=bool(row["is_active"]),
            created_at=from_storage(row["created_at"]),
            last_login_at=from_storage(row["last_login_at"]),
        )

    def create_user(
        self,
        user_id: str,
        email: str,
        password_hash: str,
        display_name: Optional[str] = None,
    ) -> User:
        """
        Create a new user in the database.

        Args:
            user_id: Unique identifier for the user (UUID)
            email: User's email address (unique, case-insensitive)
            password_hash: Bcrypt hash of the password
            display_name: User's display name

        Returns:
            The created User entity

        Raises:
            EmailAlreadyRegisteredError: If the email already has an account
        """
        now = utc_now()

        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO users
                    (id, email, password_hash, display_name, created_at)
                    VALUES (?, ?, ?, ?, ?)
                """, (
                    user_id,
                    email,
                    password_hash,
                    display_name,
                    to_storage(now),
                ))
        except sqlite3.IntegrityError as e:
            if "users.email" in str(e):
                raise EmailAlreadyRegisteredError() from e
            raise

        return User(
            id=user_id,
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            created_at=from_storage(to_storage(now)),
        )

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve a user by their unique ID."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?",
                (user_id,)
            ).fetchone()

            if row:
                return self._row_to_user(row)
            return None

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by email address (case-insensitive)."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?",
                (email,)
            ).fetchone()

            if row:
                return self._row_to_user(row)
            return None

    def update_last_login(self, user_id: str) -> bool:
        """Record a successful login. Returns False if the user is unknown."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "UPDATE users SET last_login_at = ? WHERE id = ?",
                (to_storage(utc_now()), user_id)
            )
            return cursor.rowcount > 0

    def delete(self, user_id: str) -> bool:
        """Delete a user by ID."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM users WHERE id = ?",
                (user_id,)
            )
            return cursor.rowcount > 0

