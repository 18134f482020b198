"""Tests for whole-day and whole-week loading."""

from __future__ import annotations

from collections import Counter
from datetime import date

from goaltracker.models.goal import DayOfWeek, GoalType
from goaltracker.services.batch import BatchLoader

TEST_USER = "tester"
SUNDAY = date(2024, 1, 14)
MONDAY = date(2024, 1, 15)
WEDNESDAY = date(2024, 1, 17)


class CountingRepo:
    """Wrap a repository and count calls per method."""

    def __init__(self, inner, calls: Counter, prefix: str):
        self._inner = inner
        self._calls = calls
        self._prefix = prefix

    def __getattr__(self, name):
        attr = getattr(self._inner, name)
        if not callable(attr):
            return attr

        def wrapper(*args, **kwargs):
            self._calls[f"{self._prefix}.{name}"] += 1
            return attr(*args, **kwargs)

        return wrapper


def _loader(goal_repo, daily_repo, weekly_repo, calls=None):
    calls = calls if calls is not None else Counter()
    return BatchLoader(
        CountingRepo(goal_repo, calls, "goal"),
        CountingRepo(daily_repo, calls, "daily"),
        CountingRepo(weekly_repo, calls, "weekly"),
        user_id=TEST_USER,
    )


class TestLoadDate:
    def test_partitions_and_stats(self, goal_factory, goal_repo, daily_repo, weekly_repo, tracker):
        gym = goal_factory(title="Gym", days_of_week=[DayOfWeek.MONDAY])
        rest = goal_factory(title="Rest", days_of_week=[DayOfWeek.SUNDAY])
        run = goal_factory(title="Run", goal_type=GoalType.WEEKLY)
        tracker.toggle(gym.id, MONDAY)

        data = _loader(goal_repo, daily_repo, weekly_repo).load_date(MONDAY)

        assert [view.goal.id for view in data.active] == [gym.id]
        assert [view.goal.id for view in data.inactive] == [rest.id]
        assert [view.goal.id for view in data.weekly] == [run.id]
        assert data.stats.to_dict() == {"total": 1, "completed": 1, "percentage": 100}

    def test_three_queries_regardless_of_goal_count(
        self, goal_factory, goal_repo, daily_repo, weekly_repo
    ):
        for index in range(6):
            goal_factory(title=f"Goal {index}")
        goal_factory(title="Weekly", goal_type=GoalType.WEEKLY)
        calls = Counter()

        _loader(goal_repo, daily_repo, weekly_repo, calls).load_date(MONDAY)

        assert sum(calls.values()) == 3

    def test_to_dict_shape(self, goal_factory, goal_repo, daily_repo, weekly_repo):
        goal_factory(title="Run", goal_type=GoalType.WEEKLY, is_multi_step=True, total_steps=2)

        payload = _loader(goal_repo, daily_repo, weekly_repo).load_date(WEDNESDAY).to_dict()

        assert payload["date"] == "2024-01-17"
        assert payload["week_start"] == "2024-01-14"
        assert payload["goals"] == []
        assert payload["weekly_goals"][0]["daily_incremented"] is False
        assert payload["stats"] == {"total": 0, "completed": 0, "percentage": 0}


class TestLoadWeek:
    def test_seven_days_from_three_queries(self, goal_factory, goal_repo, daily_repo, weekly_repo):
        goal_factory(title="Weekdays", days_of_week=[DayOfWeek.MONDAY, DayOfWeek.FRIDAY])
        goal_factory(title="Run", goal_type=GoalType.WEEKLY)
        calls = Counter()

        data = _loader(goal_repo, daily_repo, weekly_repo, calls).load_week(SUNDAY)

        assert sum(calls.values()) == 3
        assert data.week_dates[0] == SUNDAY
        assert len(data.daily) == len(data.weekly) == len(data.stats) == 7
        assert len(data.daily[MONDAY]) == 1
        assert data.daily[SUNDAY] == []
        assert all(len(views) == 1 for views in data.weekly.values())

    def test_start_is_normalized_to_sunday(self, goal_repo, daily_repo, weekly_repo):
        data = _loader(goal_repo, daily_repo, weekly_repo).load_week(WEDNESDAY)
        assert data.week_start == SUNDAY

    def test_matches_per_day_loads(self, goal_factory, goal_repo, daily_repo, weekly_repo, tracker):
        read = goal_factory(title="Read", is_multi_step=True, total_steps=4)
        run = goal_factory(title="Run", goal_type=GoalType.WEEKLY, is_multi_step=True, total_steps=3)
        tracker.increment(read.id, MONDAY)
        tracker.increment(run.id, MONDAY)
        tracker.toggle(read.id, WEDNESDAY)
        loader = _loader(goal_repo, daily_repo, weekly_repo)

        week = loader.load_week(SUNDAY)

        for day in week.week_dates:
            single = loader.load_date(day)
            assert [view.to_dict() for view in week.daily[day]] == [
                view.to_dict() for view in single.active
            ]
            assert [view.to_dict() for view in week.weekly[day]] == [
                view.to_dict() for view in single.weekly
            ]
            assert week.stats[day] == single.stats

    def test_to_dict_uses_iso_keys(self, goal_factory, goal_repo, daily_repo, weekly_repo):
        goal_factory(title="Read")

        payload = _loader(goal_repo, daily_repo, weekly_repo).load_week(SUNDAY).to_dict()

        assert payload["week_start"] == "2024-01-14"
        assert list(payload["daily"]) == payload["week_dates"]
        assert payload["stats"]["2024-01-15"] == {"total": 1, "completed": 0, "percentage": 0}
