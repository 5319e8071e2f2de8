"""Tests for SessionService - validation and ownership."""

import pytest

from seance_tracker.exceptions import (
    ErrorCode,
    ForbiddenError,
    InvalidIdError,
    SessionNotFoundError,
    ValidationError,
)
from seance_tracker.models import SessionType

from conftest import OTHER_USER_ID, USER_ID, utc


def session_payload(**overrides):
    payload = {"type": 1, "duration": 45, "distance": 8000, "calories": 520}
    payload.update(overrides)
    return payload


class TestCreate:
    """Tests for SessionService.create."""

    def test_create(self, session_service, session_repo):
        session = session_service.create(
            USER_ID, session_payload(date="2024-01-10T07:30:00Z")
        )

        assert session.user_id == USER_ID
        assert session.type is SessionType.RUNNING
        assert session.date == utc(2024, 1, 10, 7, 30)
        assert session_repo.get(session.id) == session

    def test_zero_distance_and_calories_allowed(self, session_service):
        session = session_service.create(
            USER_ID, session_payload(type=3, distance=0, calories=0)
        )
        assert session.distance == 0

    def test_metrics_above_64_bit_range(self, session_service, session_repo):
        session = session_service.create(
            USER_ID, session_payload(duration=10**20, calories=2**63)
        )

        stored = session_repo.get(session.id)
        assert stored.duration == 10**20
        assert stored.calories == 2**63

    def test_date_defaults_to_now(self, session_service):
        session = session_service.create(USER_ID, session_payload())
        assert session.date.tzinfo is not None

    @pytest.mark.parametrize("overrides,message", [
        ({"type": None}, "Type is required"),
        ({"type": 7}, "Type must be 1 (Running), 2 (Cycling), or 3 (Strength)"),
        ({"duration": None}, "Duration is required"),
        ({"duration": "45"}, "Duration must be a number"),
        ({"duration": 10**400}, "Duration must be a number"),
        ({"duration": 0}, "Duration must be greater than 0"),
        ({"distance": None}, "Distance is required"),
        ({"distance": -1}, "Distance must be greater than or equal to 0"),
        ({"calories": None}, "Calories are required"),
        ({"calories": False}, "Calories must be a number"),
        ({"date": "yesterday"}, "Invalid date format"),
    ])
    def test_validation_messages(self, session_service, overrides, message):
        with pytest.raises(ValidationError) as exc_info:
            session_service.create(USER_ID, session_payload(**overrides))
        assert exc_info.value.message == message


class TestOwnership:
    """Tests for get / update / delete access rules."""

    def test_get_invalid_id(self, session_service):
        with pytest.raises(InvalidIdError) as exc_info:
            session_service.get(USER_ID, "42")
        assert exc_info.value.code == ErrorCode.INVALID_ID

    def test_get_missing(self, session_service):
        with pytest.raises(SessionNotFoundError):
            session_service.get(USER_ID, "33333333-3333-4333-8333-333333333333")

    def test_get_foreign(self, session_service, add_session):
        foreign = add_session(user_id=OTHER_USER_ID)
        with pytest.raises(ForbiddenError):
            session_service.get(USER_ID, foreign.id)

    def test_update_supplied_fields_only(self, session_service, add_session):
        session = add_session(duration=30, distance=5000, calories=300)

        updated = session_service.update(USER_ID, session.id, {"duration": 40})

        assert updated.duration == 40
        assert updated.distance == 5000
        assert session_service.get(USER_ID, session.id).duration == 40

    def test_update_validates(self, session_service, add_session):
        session = add_session()
        with pytest.raises(ValidationError):
            session_service.update(USER_ID, session.id, {"duration": -3})

    def test_delete_foreign_is_forbidden(self, session_service, session_repo, add_session):
        foreign = add_session(user_id=OTHER_USER_ID)

        with pytest.raises(ForbiddenError):
            session_service.delete(USER_ID, foreign.id)
        assert session_repo.get(foreign.id) is not None

    def test_list_newest_first_with_filters(self, session_service, add_session):
        add_session(date=utc(2024, 1, 1))
        newest = add_session(date=utc(2024, 1, 3))
        add_session(type=SessionType.CYCLING, date=utc(2024, 1, 2))
        add_session(user_id=OTHER_USER_ID)

        running = session_service.list(USER_ID, session_type=1)
        assert len(running) == 2
        assert running[0].id == newest.id

        ranged = session_service.list(USER_ID, start="2024-01-02", end="2024-01-02T23:59:59Z")
        assert [s.type for s in ranged] == [SessionType.CYCLING]
