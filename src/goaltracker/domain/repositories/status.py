"""Completion status repository protocols."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...services.completion import CompletionState


class DailyStatusRepository(Protocol):
    """Completion records keyed by (goal, day)."""

    def get(self, goal_id: str, day: date, *, user_id: str) -> Optional[CompletionState]:
        """Return the stored state, or None when the occurrence was never written."""
        ...

    def list_for_range(
        self, start: date, end: date, *, user_id: str
    ) -> dict[tuple[str, date], CompletionState]:
        """Return every stored state with ``start <= day <= end``."""
        ...

    def upsert(
        self, goal_id: str, day: date, state: CompletionState, *, user_id: str
    ) -> CompletionState:
        """Insert or replace the record for one occurrence."""
        ...


class WeeklyStatusRepository(Protocol):
    """Completion records keyed by (goal, week start)."""

    def get(self, goal_id: str, week_start: date, *, user_id: str) -> Optional[CompletionState]:
        """Return the stored state, or None when the week was never written."""
        ...

    def list_for_week(self, week_start: date, *, user_id: str) -> dict[str, CompletionState]:
        """Return stored states for the week, keyed by goal id."""
        ...

    def upsert(
        self, goal_id: str, week_start: date, state: CompletionState, *, user_id: str
    ) -> CompletionState:
        """Insert or replace the record for one weekly occurrence."""
        ...
