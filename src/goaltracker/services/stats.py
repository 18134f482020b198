"""Daily completion statistics."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Iterable

from ..models.goal import GoalType
from .completion import GoalStatusView


@dataclass(slots=True, frozen=True)
class CompletionStats:
    total: int = 0
    completed: int = 0
    percentage: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def goal_percentage(view: GoalStatusView) -> float:
    """Return how far one goal is toward completion, in percent."""

    goal, status = view.goal, view.status
    if goal.is_simple:
        return 100.0 if status.completed else 0.0
    return 100.0 * status.completed_steps / goal.total_steps


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_stats(views: Iterable[GoalStatusView]) -> CompletionStats:
    """Aggregate completion across the daily goals in ``views``.

    Weekly goals and snoozed occurrences are left out. Every remaining goal
    carries equal weight regardless of its step count.
    """

    daily = [
        view
        for view in views
        if view.goal.goal_type == GoalType.DAILY and not view.status.snoozed
    ]
    if not daily:
        return CompletionStats()

    mean = sum(goal_percentage(view) for view in daily) / len(daily)
    return CompletionStats(
        total=len(daily),
        completed=sum(1 for view in daily if view.status.completed),
        percentage=_round_half_up(mean),
    )


__all__ = ["CompletionStats", "completion_stats", "goal_percentage"]
