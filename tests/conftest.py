"""Shared fixtures: temporary SQLite databases, repositories, services and
an API client wired to them."""

import os
import tempfile
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from seance_tracker.api import deps
from seance_tracker.api.middleware.rate_limit import limiter
from seance_tracker.db.repositories import GoalRepository, SessionRepository, UserRepository
from seance_tracker.main import app
from seance_tracker.models import Session, SessionType
from seance_tracker.services.account_service import AccountService
from seance_tracker.services.auth_service import get_auth_service
from seance_tracker.services.goal_service import GoalService
from seance_tracker.services.session_service import SessionService
from seance_tracker.services.statistics_service import StatisticsService


USER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_USER_ID = "22222222-2222-4222-8222-222222222222"


class FixedClock:
    """Callable clock that tests can move."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield db_path
    try:
        os.unlink(db_path)
    except OSError:
        pass


@pytest.fixture
def session_repo(temp_db_path):
    return SessionRepository(db_path=temp_db_path)


@pytest.fixture
def goal_repo(temp_db_path):
    return GoalRepository(db_path=temp_db_path)


@pytest.fixture
def user_repo(temp_db_path):
    return UserRepository(db_path=temp_db_path)


@pytest.fixture
def clock():
    """Clock fixed at Wednesday 2024-01-10 12:00 UTC."""
    return FixedClock(utc(2024, 1, 10, 12, 0))


@pytest.fixture
def goal_service(goal_repo, session_repo, clock):
    return GoalService(goal_repo, session_repo, clock=clock)


@pytest.fixture
def session_service(session_repo):
    return SessionService(session_repo)


@pytest.fixture
def statistics_service(session_repo):
    return StatisticsService(session_repo)


@pytest.fixture
def account_service(user_repo):
    return AccountService(user_repo, get_auth_service())


@pytest.fixture
def add_session(session_repo):
    """Store a session directly and return it."""

    def _add(type=SessionType.RUNNING, duration=30, distance=0, calories=0,
             date=None, user_id=USER_ID):
        session = Session.create(
            user_id=user_id,
            type=type,
            duration=duration,
            distance=distance,
            calories=calories,
            date=date or utc(2024, 1, 10, 8, 0),
        )
        return session_repo.save(session)

    return _add


@pytest.fixture
def client(goal_service, session_service, statistics_service, account_service):
    """API client backed by the temporary database; rate limiting off."""
    app.dependency_overrides[deps.get_goal_service] = lambda: goal_service
    app.dependency_overrides[deps.get_session_service] = lambda: session_service
    app.dependency_overrides[deps.get_statistics_service] = lambda: statistics_service
    app.dependency_overrides[deps.get_account_service] = lambda: account_service
    limiter.enabled = False

    yield TestClient(app)

    app.dependency_overrides.clear()
    limiter.enabled = True


def _headers(user_id: str, email: str) -> dict:
    token = get_auth_service().create_access_token(user_id, email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return _headers(USER_ID, "runner@example.com")


@pytest.fixture
def other_auth_headers():
    return _headers(OTHER_USER_ID, "cyclist@example.com")
