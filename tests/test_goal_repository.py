"""Tests for GoalRepository - store-level goal invariants.

This module tests:
1. Table and index creation
2. One active goal per user enforced by the unique partial index
3. Conditional close and delete
4. Active / closed / expired queries
"""

import pytest

from seance_tracker.db.repositories import GoalRepository
from seance_tracker.exceptions import ActiveGoalExistsError
from seance_tracker.models import Goal, GoalType, SessionType

from conftest import OTHER_USER_ID, USER_ID, utc


def make_goal(user_id=USER_ID, end=None, **kwargs):
    return Goal.create(
        user_id=user_id,
        seance_type=kwargs.get("seance_type", SessionType.RUNNING),
        goal_type=kwargs.get("goal_type", GoalType.DISTANCE),
        goal_value=kwargs.get("goal_value", 10000),
        start_date=utc(2024, 1, 1),
        end_date=end or utc(2024, 1, 31),
    )


class TestGoalRepositoryInit:
    """Tests for repository initialization."""

    def test_creates_active_goal_index(self, goal_repo):
        with goal_repo._get_connection() as conn:
            row = conn.execute(
                "SELECT name FROM sqlite_master "
                "WHERE type='index' AND name='idx_goals_one_active_per_user'"
            ).fetchone()
        assert row is not None

    def test_reopening_existing_database(self, goal_repo, temp_db_path):
        goal = goal_repo.create(make_goal())
        reopened = GoalRepository(db_path=temp_db_path)
        assert reopened.get(goal.id).id == goal.id


class TestOneActiveGoal:
    """Tests for the one-active-goal-per-user constraint."""

    def test_second_active_goal_rejected(self, goal_repo):
        goal_repo.create(make_goal())

        with pytest.raises(ActiveGoalExistsError):
            goal_repo.create(make_goal(goal_type=GoalType.CALORIES, goal_value=500))

    def test_other_user_unaffected(self, goal_repo):
        goal_repo.create(make_goal())
        goal_repo.create(make_goal(user_id=OTHER_USER_ID))

        assert goal_repo.find_active_by_owner(OTHER_USER_ID) is not None

    def test_closed_goal_does_not_block(self, goal_repo):
        first = goal_repo.create(make_goal())
        goal_repo.close_if_active(first.id, is_achieved=False)

        second = goal_repo.create(make_goal())
        assert goal_repo.find_active_by_owner(USER_ID).id == second.id


class TestConditionalWrites:
    """Tests for close_if_active and delete_active_by_owner."""

    def test_close_only_once(self, goal_repo):
        goal = goal_repo.create(make_goal())

        assert goal_repo.close_if_active(goal.id, is_achieved=True) is True
        assert goal_repo.close_if_active(goal.id, is_achieved=False) is False

        stored = goal_repo.get(goal.id)
        assert stored.is_active is False
        assert stored.is_achieved is True

    def test_close_unknown_goal(self, goal_repo):
        assert goal_repo.close_if_active("missing", is_achieved=True) is False

    def test_delete_active_leaves_history(self, goal_repo):
        closed = goal_repo.create(make_goal(end=utc(2024, 1, 5)))
        goal_repo.close_if_active(closed.id, is_achieved=False)
        active = goal_repo.create(make_goal())

        assert goal_repo.delete_active_by_owner(USER_ID) is True
        assert goal_repo.get(active.id) is None
        assert goal_repo.get(closed.id) is not None
        assert goal_repo.delete_active_by_owner(USER_ID) is False


class TestQueries:
    """Tests for the lookup helpers."""

    def test_find_closed_by_owner_newest_end_first(self, goal_repo):
        for day in (5, 20, 10):
            goal = goal_repo.create(make_goal(end=utc(2024, 1, day)))
            goal_repo.close_if_active(goal.id, is_achieved=False)

        ends = [g.end_date.day for g in goal_repo.find_closed_by_owner(USER_ID)]
        assert ends == [20, 10, 5]

    def test_find_expired_active(self, goal_repo):
        expired = goal_repo.create(make_goal(end=utc(2024, 1, 5)))
        goal_repo.create(make_goal(user_id=OTHER_USER_ID, end=utc(2024, 2, 1)))

        found = goal_repo.find_expired_active(utc(2024, 1, 10))
        assert [g.id for g in found] == [expired.id]

    def test_round_trip_preserves_fields(self, goal_repo):
        goal = goal_repo.create(make_goal(goal_value=42.5))
        stored = goal_repo.get(goal.id)

        assert stored.goal_value == 42.5
        assert stored.seance_type is SessionType.RUNNING
        assert stored.start_date == utc(2024, 1, 1)
        assert stored.end_date == utc(2024, 1, 31)
