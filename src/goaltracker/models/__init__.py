"""SQLModel table exports."""

from .goal import DAYS_OF_WEEK, DayOfWeek, Goal, GoalType
from .status import DailyGoalStatus, WeeklyGoalStatus

__all__ = [
    "DAYS_OF_WEEK",
    "DailyGoalStatus",
    "DayOfWeek",
    "Goal",
    "GoalType",
    "WeeklyGoalStatus",
]
