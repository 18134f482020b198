"""SQLModel implementations of the daily and weekly status repositories."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from sqlmodel import select

from ...models.status import DailyGoalStatus, WeeklyGoalStatus
from ...services.completion import CompletionState
from ..database import SessionFactory, store_errors

StatusRow = Union[DailyGoalStatus, WeeklyGoalStatus]


def _parse_stamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _format_stamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _state_from_row(row: StatusRow) -> CompletionState:
    return CompletionState(
        completed=row.completed,
        completed_at=row.completed_at,
        completed_steps=row.completed_steps,
        step_completions=[_parse_stamp(stamp) for stamp in (row.step_completions or [])],
        snoozed=bool(getattr(row, "snoozed", False)),
        daily_increments=dict(getattr(row, "daily_increments", None) or {}),
    )


def _apply_state(row: StatusRow, state: CompletionState) -> None:
    row.completed = state.completed
    row.completed_at = state.completed_at
    row.completed_steps = state.completed_steps
    # JSON columns are replaced wholesale so SQLAlchemy sees the change
    row.step_completions = [_format_stamp(stamp) for stamp in state.step_completions]
    row.last_updated = datetime.now(timezone.utc)


class SQLModelDailyStatusRepository:
    """Daily completion rows keyed by (user, goal, day)."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def _select(self, goal_id: str, day: date, user_id: str):
        return (
            select(DailyGoalStatus)
            .where(DailyGoalStatus.user_id == user_id)
            .where(DailyGoalStatus.goal_id == goal_id)
            .where(DailyGoalStatus.occurred_on == day)
        )

    def get(self, goal_id: str, day: date, *, user_id: str) -> Optional[CompletionState]:
        with store_errors("daily_status.get"), self.session_factory() as session:
            row = session.exec(self._select(goal_id, day, user_id)).first()
            return _state_from_row(row) if row else None

    def list_for_range(
        self, start: date, end: date, *, user_id: str
    ) -> dict[tuple[str, date], CompletionState]:
        with store_errors("daily_status.list_for_range"), self.session_factory() as session:
            rows = session.exec(
                select(DailyGoalStatus)
                .where(DailyGoalStatus.user_id == user_id)
                .where(DailyGoalStatus.occurred_on >= start)
                .where(DailyGoalStatus.occurred_on <= end)
            ).all()
            return {(row.goal_id, row.occurred_on): _state_from_row(row) for row in rows}

    def upsert(
        self, goal_id: str, day: date, state: CompletionState, *, user_id: str
    ) -> CompletionState:
        with store_errors("daily_status.upsert"), self.session_factory() as session:
            row = session.exec(self._select(goal_id, day, user_id)).first()
            if row is None:
                row = DailyGoalStatus(user_id=user_id, goal_id=goal_id, occurred_on=day)
            _apply_state(row, state)
            row.snoozed = state.snoozed
            session.add(row)
            session.commit()
            session.refresh(row)
            return _state_from_row(row)


class SQLModelWeeklyStatusRepository:
    """Weekly completion rows keyed by (user, goal, week start)."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def _select(self, goal_id: str, week_start: date, user_id: str):
        return (
            select(WeeklyGoalStatus)
            .where(WeeklyGoalStatus.user_id == user_id)
            .where(WeeklyGoalStatus.goal_id == goal_id)
            .where(WeeklyGoalStatus.week_start == week_start)
        )

    def get(self, goal_id: str, week_start: date, *, user_id: str) -> Optional[CompletionState]:
        with store_errors("weekly_status.get"), self.session_factory() as session:
            row = session.exec(self._select(goal_id, week_start, user_id)).first()
            return _state_from_row(row) if row else None

    def list_for_week(self, week_start: date, *, user_id: str) -> dict[str, CompletionState]:
        with store_errors("weekly_status.list_for_week"), self.session_factory() as session:
            rows = session.exec(
                select(WeeklyGoalStatus)
                .where(WeeklyGoalStatus.user_id == user_id)
                .where(WeeklyGoalStatus.week_start == week_start)
            ).all()
            return {row.goal_id: _state_from_row(row) for row in rows}

    def upsert(
        self, goal_id: str, week_start: date, state: CompletionState, *, user_id: str
    ) -> CompletionState:
        with store_errors("weekly_status.upsert"), self.session_factory() as session:
            row = session.exec(self._select(goal_id, week_start, user_id)).first()
            if row is None:
                row = WeeklyGoalStatus(user_id=user_id, goal_id=goal_id, week_start=week_start)
            _apply_state(row, state)
            row.daily_increments = dict(state.daily_increments)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _state_from_row(row)
