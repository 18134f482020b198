"""Goal definitions tracked by the app."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class GoalType(str, Enum):
    """Recurrence cadence of a goal."""

    DAILY = "daily"
    WEEKLY = "weekly"


class DayOfWeek(str, Enum):
    """Named weekdays, declared in Sunday-first index order."""

    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


DAYS_OF_WEEK: tuple[DayOfWeek, ...] = tuple(DayOfWeek)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_goal_id() -> str:
    return str(uuid4())


class Goal(SQLModel, table=True):
    """A recurring intention owned by one user.

    Goals are never physically removed; archiving flips ``is_active`` so the
    completion history stays attached.
    """

    __tablename__: ClassVar[str] = "goal"

    id: str = Field(default_factory=_new_goal_id, primary_key=True, max_length=36)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    title: str = Field(nullable=False, max_length=120)
    description: str = Field(default="", max_length=400)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False, index=True)
    is_active: bool = Field(default=True, nullable=False)
    goal_type: GoalType = Field(default=GoalType.DAILY, nullable=False)
    days_of_week: list[str] = Field(
        default_factory=lambda: [day.value for day in DAYS_OF_WEEK],
        sa_column=Column(JSON, nullable=False),
    )
    is_multi_step: bool = Field(default=False, nullable=False)
    total_steps: int = Field(default=1, nullable=False, ge=1)

    @property
    def step_count(self) -> int:
        """Effective number of steps; single-step goals always count as one."""

        if not self.is_multi_step:
            return 1
        return max(1, self.total_steps)

    @property
    def is_simple(self) -> bool:
        """True when the goal has no meaningful steps."""

        return not self.is_multi_step or self.total_steps <= 1

    @property
    def is_weekly(self) -> bool:
        return self.goal_type == GoalType.WEEKLY

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "is_active": self.is_active,
            "goal_type": GoalType(self.goal_type).value,
            "days_of_week": list(self.days_of_week or []),
            "is_multi_step": self.is_multi_step,
            "total_steps": self.total_steps,
        }


__all__ = ["DAYS_OF_WEEK", "DayOfWeek", "Goal", "GoalType"]
