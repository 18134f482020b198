"""Concrete repository implementations using SQLModel."""

from .goal import SQLModelGoalRepository
from .status import SQLModelDailyStatusRepository, SQLModelWeeklyStatusRepository

__all__ = [
    "SQLModelDailyStatusRepository",
    "SQLModelGoalRepository",
    "SQLModelWeeklyStatusRepository",
]
