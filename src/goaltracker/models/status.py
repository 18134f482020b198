"""Per-occurrence completion rows for daily and weekly goals."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DailyGoalStatus(SQLModel, table=True):
    """Completion record for a daily goal on one calendar day."""

    __tablename__: ClassVar[str] = "daily_goal_status"
    __table_args__ = (
        UniqueConstraint("user_id", "goal_id", "occurred_on", name="uq_daily_goal_status_key"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    goal_id: str = Field(foreign_key="goal.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    completed: bool = Field(default=False, nullable=False)
    completed_at: Optional[datetime] = Field(default=None)
    completed_steps: int = Field(default=0, nullable=False)
    step_completions: list[Optional[str]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    snoozed: bool = Field(default=False, nullable=False)
    last_updated: datetime = Field(default_factory=_utcnow, nullable=False)


class WeeklyGoalStatus(SQLModel, table=True):
    """Completion record for a weekly goal in the week starting on ``week_start``."""

    __tablename__: ClassVar[str] = "weekly_goal_status"
    __table_args__ = (
        UniqueConstraint("user_id", "goal_id", "week_start", name="uq_weekly_goal_status_key"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    goal_id: str = Field(foreign_key="goal.id", nullable=False, index=True)
    week_start: date = Field(nullable=False, index=True)
    completed: bool = Field(default=False, nullable=False)
    completed_at: Optional[datetime] = Field(default=None)
    completed_steps: int = Field(default=0, nullable=False)
    step_completions: list[Optional[str]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    # ISO date -> whether that day's increment is currently applied
    daily_increments: dict[str, bool] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    last_updated: datetime = Field(default_factory=_utcnow, nullable=False)


__all__ = ["DailyGoalStatus", "WeeklyGoalStatus"]
