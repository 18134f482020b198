"""Database and service wiring for the Flask app."""

from __future__ import annotations

from flask import Flask, current_app, g, request

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelDailyStatusRepository,
    SQLModelGoalRepository,
    SQLModelWeeklyStatusRepository,
)
from .services.tracker import GoalTracker

USER_HEADER = "X-User-Id"


def init_db(app: Flask) -> None:
    """Create the engine from app config and make sure the schema exists."""

    config: BaseConfig = app.config["GOALTRACKER_CONFIG"]
    engine = create_db_engine(config)
    init_database(engine)

    state = app.extensions.setdefault("goaltracker", {})
    state["engine"] = engine
    state["session_factory"] = create_session_factory(engine)

    @app.teardown_appcontext
    def _drop_tracker(exception: BaseException | None) -> None:  # pragma: no cover
        g.pop("goal_tracker", None)


def get_engine():
    """Return the initialized SQLModel engine."""

    state = current_app.extensions.get("goaltracker", {})
    if "engine" not in state:  # pragma: no cover - exercised in integration tests
        raise RuntimeError("Database engine not initialized")
    return state["engine"]


def get_session_factory() -> SessionFactory:
    state = current_app.extensions.get("goaltracker", {})
    if "session_factory" not in state:  # pragma: no cover
        raise RuntimeError("Database engine not initialized")
    return state["session_factory"]


def current_user_id() -> str:
    """Identity of the acting user, supplied by the fronting auth layer."""

    header = request.headers.get(USER_HEADER, "").strip()
    if header:
        return header
    config: BaseConfig = current_app.config["GOALTRACKER_CONFIG"]
    return config.DEFAULT_USER


def get_tracker() -> GoalTracker:
    """Return the request's :class:`GoalTracker`, building it on first use."""

    if "goal_tracker" not in g:
        factory = get_session_factory()
        g.goal_tracker = GoalTracker(
            SQLModelGoalRepository(factory),
            SQLModelDailyStatusRepository(factory),
            SQLModelWeeklyStatusRepository(factory),
            user_id=current_user_id(),
            clock=current_app.extensions["goaltracker"].get("clock"),
        )
    return g.goal_tracker
