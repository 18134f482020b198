"""Decide which goals are scheduled on a given date."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from ..models.goal import Goal, GoalType
from .dates import day_of_week


@dataclass(slots=True)
class Occurrences:
    """Goals split by how they apply to one date."""

    active: list[Goal] = field(default_factory=list)
    inactive: list[Goal] = field(default_factory=list)
    weekly: list[Goal] = field(default_factory=list)


def is_scheduled(goal: Goal, day: date) -> bool:
    """Return True when ``goal`` has an occurrence covering ``day``.

    Weekly goals cover every day of every week while active.
    """

    if not goal.is_active:
        return False
    if goal.goal_type == GoalType.WEEKLY:
        return True
    return day_of_week(day).value in (goal.days_of_week or [])


def resolve(goals: Iterable[Goal], day: date) -> Occurrences:
    """Partition ``goals`` into active daily, inactive daily and weekly lists.

    Input order is preserved in every list.
    """

    result = Occurrences()
    for goal in goals:
        if goal.goal_type == GoalType.WEEKLY:
            if goal.is_active:
                result.weekly.append(goal)
            continue
        if is_scheduled(goal, day):
            result.active.append(goal)
        else:
            result.inactive.append(goal)
    return result


__all__ = ["Occurrences", "is_scheduled", "resolve"]
