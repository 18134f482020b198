"""SQLModel implementation of the goal repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.goal import Goal
from ..database import SessionFactory, store_errors


class SQLModelGoalRepository:
    """SQLModel-based goal repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(
        self, goal_id: str, *, user_id: str, include_inactive: bool = False
    ) -> Optional[Goal]:
        """Retrieve a goal by ID."""
        with store_errors("goal.get_by_id"), self.session_factory() as session:
            statement = select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
            if not include_inactive:
                statement = statement.where(Goal.is_active == True)  # noqa: E712
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: str, include_inactive: bool = False) -> list[Goal]:
        """List goals, most recently created first."""
        with store_errors("goal.list_all"), self.session_factory() as session:
            statement = (
                select(Goal)
                .where(Goal.user_id == user_id)
                .order_by(Goal.created_at.desc())  # type: ignore[union-attr]
            )
            if not include_inactive:
                statement = statement.where(Goal.is_active == True)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active(self, *, user_id: str) -> list[Goal]:
        """List only active goals."""
        return self.list_all(user_id=user_id, include_inactive=False)

    def create(self, goal: Goal, *, user_id: str) -> Goal:
        """Create a new goal."""
        with store_errors("goal.create"), self.session_factory() as session:
            goal.user_id = user_id
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def update(self, goal: Goal, *, user_id: str) -> Goal:
        """Update an existing goal."""
        with store_errors("goal.update"), self.session_factory() as session:
            goal.user_id = user_id
            merged = session.merge(goal)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def archive(self, goal_id: str, *, user_id: str) -> bool:
        """Flag a goal inactive; its history stays in place."""
        with store_errors("goal.archive"), self.session_factory() as session:
            goal = session.exec(
                select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
            ).first()
            if goal is None or not goal.is_active:
                return False
            goal.is_active = False
            session.add(goal)
            session.commit()
            return True
