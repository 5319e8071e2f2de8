"""SQLite-backed repository for workout sessions."""

import sqlite3
from datetime import datetime
from typing import List, Optional

from .base import SQLiteStore
from ...models.sessions import Session, SessionType
from ...utils.dates import from_storage, to_storage, utc_now


class SessionRepository(SQLiteStore):
    """
    SQLite-backed repository for Session entities.

    Sessions are queried by owner, optionally narrowed by activity type and
    an inclusive date range.
    """

    def _ensure_table_exists(self):
        """Ensure the sessions table exists."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    type INTEGER NOT NULL CHECK (type IN (1, 2, 3)),
                    duration REAL NOT NULL CHECK (duration > 0),
                    distance REAL NOT NULL DEFAULT 0 CHECK (distance >= 0),
                    calories REAL NOT NULL DEFAULT 0 CHECK (calories >= 0),
                    date TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_sessions_user_type_date
                ON sessions(user_id, type, date)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_sessions_user_date
                ON sessions(user_id, date)
            """)

    def _row_to_session(self, row: sqlite3.Row) -> Session:
        """Convert a database row to a Session."""
        return Session(
            id=row["id"],
            user_id=row["user_id"],
            type=SessionType(row["type"]),
            duration=_number(row["duration"]),
            distance=_number(row["distance"]),
            calories=_number(row["calories"]),
            date=from_storage(row["date"]),
        )

    def save(self, entity: Session) -> Session:
        """
        Insert or update a session.

        Args:
            entity: The session to save

        Returns:
            The saved session
        """
        now = to_storage(utc_now())
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO sessions
                (id, user_id, type, duration, distance, calories, date, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    type = excluded.type,
                    duration = excluded.duration,
                    distance = excluded.distance,
                    calories = excluded.calories,
                    date = excluded.date,
                    updated_at = excluded.updated_at
            """, (
                entity.id,
                entity.user_id,
                int(entity.type),
                entity.duration,
                entity.distance,
                entity.calories,
                to_storage(entity.date),
                now,
                now,
            ))
        return entity

    def get(self, entity_id: str) -> Optional[Session]:
        """Retrieve a session by its ID."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM sessions WHERE id = ?",
                (entity_id,)
            ).fetchone()

            if row:
                return self._row_to_session(row)
            return None

    def find_by_owner(
        self,
        user_id: str,
        session_type: Optional[SessionType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        ascending: bool = True,
    ) -> List[Session]:
        """
        All sessions of a user, optionally narrowed by type and date range.

        Unpaginated; it feeds the aggregations and the session listing.
        """
        query, params = self._build_filter_query(
            user_id=user_id, type=session_type, start=start, end=end,
        )
        query += " ORDER BY date ASC" if ascending else " ORDER BY date DESC"

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_session(row) for row in rows]

    def _build_filter_query(self, **filters) -> tuple[str, list]:
        query = "SELECT * FROM sessions WHERE 1=1"
        params: list = []

        if filters.get("user_id") is not None:
            query += " AND user_id = ?"
            params.append(filters["user_id"])

        if filters.get("type") is not None:
            query += " AND type = ?"
            params.append(int(filters["type"]))

        if filters.get("start") is not None:
            query += " AND date >= ?"
            params.append(to_storage(filters["start"]))

        if filters.get("end") is not None:
            query += " AND date <= ?"
            params.append(to_storage(filters["end"]))

        return query, params

    def delete(self, entity_id: str) -> bool:
        """Delete a session by its ID."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM sessions WHERE id = ?",
                (entity_id,)
            )
            return cursor.rowcount > 0


def _number(value):
    """SQLite REAL columns come back as floats; keep whole numbers as ints."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
