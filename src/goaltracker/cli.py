"""Flask CLI commands for GoalTracker."""

from __future__ import annotations

import click
from flask import Flask

from .models.goal import DayOfWeek, Goal, GoalType

DEMO_GOALS = (
    {"title": "Morning stretch", "days_of_week": list(DayOfWeek)},
    {
        "title": "Drink water",
        "is_multi_step": True,
        "total_steps": 8,
        "days_of_week": list(DayOfWeek),
    },
    {
        "title": "Strength training",
        "days_of_week": [DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY, DayOfWeek.FRIDAY],
    },
    {"title": "Call family", "goal_type": GoalType.WEEKLY},
    {
        "title": "Run",
        "goal_type": GoalType.WEEKLY,
        "is_multi_step": True,
        "total_steps": 3,
    },
)


def init_app(app: Flask) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("goaltracker-init-db")
    def goaltracker_init_db() -> None:
        """Create any missing tables."""

        from .extensions import get_engine
        from .infra.database import init_database

        init_database(get_engine())
        click.echo("Database schema is up to date.")

    @app.cli.command("goaltracker-seed")
    @click.option("--user", "user_id", default=None, help="Owner of the demo goals")
    def goaltracker_seed(user_id: str | None) -> None:
        """Create a handful of demo goals."""

        from .blueprints.goals.forms import GoalForm
        from .extensions import get_session_factory
        from .infra.repositories import SQLModelGoalRepository

        owner = user_id or app.config["GOALTRACKER_CONFIG"].DEFAULT_USER
        repo = SQLModelGoalRepository(get_session_factory())
        existing = {goal.title for goal in repo.list_all(user_id=owner, include_inactive=True)}
        created = 0
        for spec in DEMO_GOALS:
            if spec["title"] in existing:
                continue
            form = GoalForm.parse(spec)
            repo.create(Goal(user_id=owner, **form.to_goal_fields()), user_id=owner)
            created += 1
        click.echo(f"Seeded {created} demo goals for {owner}.")
