"""Repository protocol definitions for domain layer."""

from .goal import GoalRepository
from .status import DailyStatusRepository, WeeklyStatusRepository

__all__ = [
    "DailyStatusRepository",
    "GoalRepository",
    "WeeklyStatusRepository",
]
