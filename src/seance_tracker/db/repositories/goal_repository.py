"""SQLite-backed repository for goals.

The one-active-goal-per-user rule lives here rather than in the service:
a unique partial index on goals(user_id) WHERE is_active = 1 rejects a
second active row, and the active -> closed transition is a single
conditional UPDATE so that concurrent evaluations close a goal only once.
"""

import sqlite3
from datetime import datetime
from typing import List, Optional

from .base import SQLiteStore
from ...exceptions import ActiveGoalExistsError
from ...models.goals import Goal, GoalType
from ...models.sessions import SessionType
from ...utils.dates import from_storage, to_storage, utc_now


class GoalRepository(SQLiteStore):
    """SQLite-backed repository for Goal entities."""

    def _ensure_table_exists(self):
        """Ensure the goals table and its indexes exist."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS goals (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    seance_type INTEGER NOT NULL CHECK (seance_type IN (1, 2, 3)),
                    goal_type INTEGER NOT NULL CHECK (goal_type IN (1, 2, 3)),
                    goal_value REAL NOT NULL CHECK (goal_value > 0),
                    start_date TEXT NOT NULL,
                    end_date TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    is_achieved INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    closed_at TEXT
                )
            """)
            conn.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_goals_one_active_per_user
                ON goals(user_id) WHERE is_active = 1
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_goals_user_end_date
                ON goals(user_id, end_date)
            """)

    def _row_to_goal(self, row: sqlite3.Row) -> Goal:
        """Convert a database row to a Goal."""
        goal_value = row["goal_value"]
        if isinstance(goal_value, float) and goal_value.is_integer():
            goal_value = int(goal_value)

        return Goal(
            id=row["id"],
            user_id=row["user_id"],
            seance_type=SessionType(row["seance_type"]),
            goal_type=GoalType(row["goal_type"]),
            goal_value=goal_value,
            start_date=from_storage(row["start_date"]),
            end_date=from_storage(row["end_date"]),
            is_active=bool(row["is_active"]),
            is_achieved=bool(row["is_achieved"]),
            created_at=from_storage(row["created_at"]),
        )

    def create(self, goal: Goal) -> Goal:
        """
        Insert a new goal.

        Raises:
            ActiveGoalExistsError: If the user already has an active goal.
        """
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO goals
                    (id, user_id, seance_type, goal_type, goal_value,
                     start_date, end_date, is_active, is_achieved, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    goal.id,
                    goal.user_id,
                    int(goal.seance_type),
                    int(goal.goal_type),
                    goal.goal_value,
                    to_storage(goal.start_date),
                    to_storage(goal.end_date),
                    1 if goal.is_active else 0,
                    1 if goal.is_achieved else 0,
                    to_storage(goal.created_at),
                ))
        except sqlite3.IntegrityError as e:
            if "UNIQUE constraint failed: goals.user_id" in str(e):
                raise ActiveGoalExistsError(goal.user_id) from e
            raise
        return goal

    def get(self, entity_id: str) -> Optional[Goal]:
        """Retrieve a goal by its ID."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM goals WHERE id = ?",
                (entity_id,)
            ).fetchone()

            if row:
                return self._row_to_goal(row)
            return None

    def find_active_by_owner(self, user_id: str) -> Optional[Goal]:
        """The user's active goal, if any."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM goals WHERE user_id = ? AND is_active = 1",
                (user_id,)
            ).fetchone()

            if row:
                return self._row_to_goal(row)
            return None

    def find_closed_by_owner(self, user_id: str) -> List[Goal]:
        """All closed goals of a user ordered by end_date descending."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """
                SELECT * FROM goals
                WHERE user_id = ? AND is_active = 0
                ORDER BY end_date DESC
                """,
                (user_id,)
            ).fetchall()
            return [self._row_to_goal(row) for row in rows]

    def find_expired_active(self, now: datetime) -> List[Goal]:
        """Active goals of any user whose end_date is before now."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM goals WHERE is_active = 1 AND end_date < ?",
                (to_storage(now),)
            ).fetchall()
            return [self._row_to_goal(row) for row in rows]

    def close_if_active(self, goal_id: str, is_achieved: bool) -> bool:
        """
        Atomically close a goal if it is still active.

        Args:
            goal_id: The goal to close
            is_achieved: Outcome recorded with the closure

        Returns:
            True if this call performed the transition, False if the goal was
            already closed (or deleted) by someone else.
        """
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                UPDATE goals
                SET is_active = 0, is_achieved = ?, closed_at = ?
                WHERE id = ? AND is_active = 1
                """,
                (1 if is_achieved else 0, to_storage(utc_now()), goal_id)
            )
            return cursor.rowcount > 0

    def delete_active_by_owner(self, user_id: str) -> bool:
        """Delete the user's active goal. Returns False if there was none."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM goals WHERE user_id = ? AND is_active = 1",
                (user_id,)
            )
            return cursor.rowcount > 0

