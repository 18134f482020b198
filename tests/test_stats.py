"""Tests for daily completion statistics."""

from __future__ import annotations

from datetime import date, datetime, timezone

from goaltracker.models.goal import Goal, GoalType
from goaltracker.services.completion import CompletionState, GoalStatusView
from goaltracker.services.stats import CompletionStats, completion_stats, goal_percentage

NOW = datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)
DAY = date(2024, 1, 15)


def _view(*, goal_type=GoalType.DAILY, is_multi_step=False, total_steps=1, **state):
    goal = Goal(
        user_id="tester",
        title="Goal",
        goal_type=goal_type,
        is_multi_step=is_multi_step,
        total_steps=total_steps,
    )
    return GoalStatusView(goal=goal, day=DAY, status=CompletionState(**state))


class TestGoalPercentage:
    def test_simple_goal_is_all_or_nothing(self):
        assert goal_percentage(_view()) == 0.0
        assert goal_percentage(_view(completed=True, completed_steps=1)) == 100.0

    def test_multi_step_goal_is_proportional(self):
        view = _view(is_multi_step=True, total_steps=4, completed_steps=1)
        assert goal_percentage(view) == 25.0


class TestCompletionStats:
    """Aggregation over the active daily goals of a date."""

    def test_empty_input(self):
        assert completion_stats([]) == CompletionStats(total=0, completed=0, percentage=0)

    def test_all_complete(self):
        views = [_view(completed=True, completed_steps=1) for _ in range(3)]
        assert completion_stats(views) == CompletionStats(total=3, completed=3, percentage=100)

    def test_partial_multi_step_goal(self):
        views = [
            _view(is_multi_step=True, total_steps=4, completed_steps=2),
            _view(),
        ]
        # (50 + 0) / 2
        assert completion_stats(views) == CompletionStats(total=2, completed=0, percentage=25)

    def test_goals_weigh_equally(self):
        views = [
            _view(completed=True, completed_steps=1),
            _view(is_multi_step=True, total_steps=10, completed_steps=0),
        ]
        assert completion_stats(views).percentage == 50

    def test_rounds_half_up(self):
        views = [
            _view(is_multi_step=True, total_steps=8, completed_steps=1),  # 12.5
        ]
        assert completion_stats(views).percentage == 13

    def test_weekly_and_snoozed_goals_are_excluded(self):
        views = [
            _view(completed=True, completed_steps=1),
            _view(snoozed=True),
            _view(goal_type=GoalType.WEEKLY),
        ]
        assert completion_stats(views) == CompletionStats(total=1, completed=1, percentage=100)

    def test_only_snoozed_goals(self):
        assert completion_stats([_view(snoozed=True)]) == CompletionStats()

    def test_to_dict(self):
        assert CompletionStats(total=2, completed=1, percentage=50).to_dict() == {
            "total": 2,
            "completed": 1,
            "percentage": 50,
        }
