"""Load whole-day and whole-week views in a fixed number of store queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..domain.repositories import DailyStatusRepository, GoalRepository, WeeklyStatusRepository
from ..logging_config import get_logger
from ..models.goal import Goal
from .completion import GoalStatusView, read_effective
from .dates import format_date, week_dates, week_start
from .occurrences import resolve
from .stats import CompletionStats, completion_stats

logger = get_logger(__name__)


def _views(payload: list[GoalStatusView]) -> list[dict]:
    return [view.to_dict() for view in payload]


@dataclass(slots=True)
class DateData:
    """Everything the daily screen shows for one date."""

    day: date
    active: list[GoalStatusView] = field(default_factory=list)
    weekly: list[GoalStatusView] = field(default_factory=list)
    inactive: list[GoalStatusView] = field(default_factory=list)
    stats: CompletionStats = field(default_factory=CompletionStats)

    def to_dict(self) -> dict:
        return {
            "date": format_date(self.day),
            "week_start": format_date(week_start(self.day)),
            "goals": _views(self.active),
            "weekly_goals": _views(self.weekly),
            "inactive_goals": _views(self.inactive),
            "stats": self.stats.to_dict(),
        }


@dataclass(slots=True)
class WeekData:
    """Per-day views for the 7 days of one week."""

    week_start: date
    week_dates: list[date]
    goals: list[Goal]
    daily: dict[date, list[GoalStatusView]] = field(default_factory=dict)
    weekly: dict[date, list[GoalStatusView]] = field(default_factory=dict)
    stats: dict[date, CompletionStats] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "week_start": format_date(self.week_start),
            "week_dates": [format_date(day) for day in self.week_dates],
            "goals": [goal.to_dict() for goal in self.goals],
            "daily": {format_date(day): _views(views) for day, views in self.daily.items()},
            "weekly": {format_date(day): _views(views) for day, views in self.weekly.items()},
            "stats": {format_date(day): stats.to_dict() for day, stats in self.stats.items()},
        }


class BatchLoader:
    """Builds read-only views without ever writing status rows."""

    def __init__(
        self,
        goal_repo: GoalRepository,
        daily_repo: DailyStatusRepository,
        weekly_repo: WeeklyStatusRepository,
        *,
        user_id: str,
    ):
        self.goal_repo = goal_repo
        self.daily_repo = daily_repo
        self.weekly_repo = weekly_repo
        self.user_id = user_id

    def load_date(self, day: date) -> DateData:
        """Resolve one date: one goal query plus one query per status table."""

        goals = self.goal_repo.list_active(user_id=self.user_id)
        daily_states = self.daily_repo.list_for_range(day, day, user_id=self.user_id)
        weekly_states = self.weekly_repo.list_for_week(week_start(day), user_id=self.user_id)

        occurrences = resolve(goals, day)
        active = [
            read_effective(goal, daily_states.get((goal.id, day)), day)
            for goal in occurrences.active
        ]
        return DateData(
            day=day,
            active=active,
            weekly=[
                read_effective(goal, weekly_states.get(goal.id), day)
                for goal in occurrences.weekly
            ],
            inactive=[read_effective(goal, None, day) for goal in occurrences.inactive],
            stats=completion_stats(active),
        )

    def load_week(self, start: date) -> WeekData:
        """Resolve all 7 days of the week containing ``start``.

        ``start`` is normalized to its Sunday.
        """

        start = week_start(start)
        dates = week_dates(start)
        goals = self.goal_repo.list_active(user_id=self.user_id)
        daily_states = self.daily_repo.list_for_range(dates[0], dates[-1], user_id=self.user_id)
        weekly_states = self.weekly_repo.list_for_week(start, user_id=self.user_id)

        data = WeekData(week_start=start, week_dates=dates, goals=goals)
        for day in dates:
            occurrences = resolve(goals, day)
            data.daily[day] = [
                read_effective(goal, daily_states.get((goal.id, day)), day)
                for goal in occurrences.active
            ]
            data.weekly[day] = [
                read_effective(goal, weekly_states.get(goal.id), day)
                for goal in occurrences.weekly
            ]
            data.stats[day] = completion_stats(data.daily[day])

        logger.debug(
            "Loaded week",
            extra={
                "week_start": format_date(start),
                "goals": len(goals),
                "daily_rows": len(daily_states),
                "weekly_rows": len(weekly_states),
            },
        )
        return data


__all__ = ["BatchLoader", "DateData", "WeekData"]
