"""Pytest configuration and shared fixtures for GoalTracker tests.

This module provides database fixtures, goal factories and a Flask client so
domain logic, repositories and routes can be exercised without touching the
real app database.
"""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from goaltracker.models import DayOfWeek, Goal, GoalType
from goaltracker.infra.repositories import (
    SQLModelDailyStatusRepository,
    SQLModelGoalRepository,
    SQLModelWeeklyStatusRepository,
)
from goaltracker.services.tracker import GoalTracker

TEST_USER = "tester"
FIXED_NOW = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Keep config-created directories and log files out of the working tree."""

    monkeypatch.setenv("GOALTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("GOALTRACKER_DATABASE_URL", raising=False)
    return tmp_path


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def goal_repo(session_factory):
    return SQLModelGoalRepository(session_factory)


@pytest.fixture
def daily_repo(session_factory):
    return SQLModelDailyStatusRepository(session_factory)


@pytest.fixture
def weekly_repo(session_factory):
    return SQLModelWeeklyStatusRepository(session_factory)


class Clock:
    """Deterministic clock; each call advances by one second."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def tracker(goal_repo, daily_repo, weekly_repo, clock):
    return GoalTracker(goal_repo, daily_repo, weekly_repo, user_id=TEST_USER, clock=clock)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def goal_factory(goal_repo):
    """Factory for creating persisted goals.

    Each call gets a ``created_at`` one minute later than the previous one so
    newest-first ordering is deterministic.
    """

    counter = {"n": 0}

    def _create_goal(
        title: str = "Test Goal",
        goal_type: GoalType = GoalType.DAILY,
        days_of_week: list[DayOfWeek] | None = None,
        is_multi_step: bool = False,
        total_steps: int = 1,
        is_active: bool = True,
        user_id: str = TEST_USER,
    ) -> Goal:
        counter["n"] += 1
        days = days_of_week if days_of_week is not None else list(DayOfWeek)
        goal = Goal(
            user_id=user_id,
            title=title,
            goal_type=goal_type,
            days_of_week=[day.value for day in days],
            is_multi_step=is_multi_step,
            total_steps=total_steps,
            is_active=is_active,
            created_at=FIXED_NOW + timedelta(minutes=counter["n"]),
        )
        return goal_repo.create(goal, user_id=user_id)

    return _create_goal


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    from goaltracker import create_app

    monkeypatch.setenv("GOALTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("GOALTRACKER_DATABASE_URL", f"sqlite:///{tmp_path / 'goals.db'}")
    monkeypatch.setenv("GOALTRACKER_DEFAULT_USER", TEST_USER)
    application = create_app("testing")
    application.extensions["goaltracker"]["clock"] = Clock()
    return application


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
