"""Goal repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.goal import Goal


class GoalRepository(Protocol):
    """Repository for goal definitions, scoped to one user."""

    def get_by_id(
        self, goal_id: str, *, user_id: str, include_inactive: bool = False
    ) -> Optional[Goal]:
        """Retrieve a goal by ID."""
        ...

    def list_all(self, *, user_id: str, include_inactive: bool = False) -> list[Goal]:
        """List goals, most recently created first."""
        ...

    def list_active(self, *, user_id: str) -> list[Goal]:
        """List only active goals."""
        ...

    def create(self, goal: Goal, *, user_id: str) -> Goal:
        """Create a new goal."""
        ...

    def update(self, goal: Goal, *, user_id: str) -> Goal:
        """Update an existing goal."""
        ...

    def archive(self, goal_id: str, *, user_id: str) -> bool:
        """Soft-delete a goal; returns False when nothing matched."""
        ...
