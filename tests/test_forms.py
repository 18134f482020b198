"""Tests for goal payload validation."""

from __future__ import annotations

import pytest

from goaltracker.blueprints.goals.forms import GoalForm, GoalUpdateForm
from goaltracker.errors import InvalidGoal
from goaltracker.models.goal import DayOfWeek, GoalType


class TestGoalForm:
    def test_defaults(self):
        form = GoalForm.parse({"title": "  Read  "})

        assert form.title == "Read"
        assert form.goal_type is GoalType.DAILY
        assert form.days_of_week == list(DayOfWeek)
        assert form.total_steps == 1

    def test_days_accept_comma_separated_string(self):
        form = GoalForm.parse({"title": "Gym", "days_of_week": "Friday, monday,monday"})
        assert form.days_of_week == [DayOfWeek.MONDAY, DayOfWeek.FRIDAY]

    def test_days_accept_enum_members(self):
        form = GoalForm.parse({"title": "Gym", "days_of_week": [DayOfWeek.SATURDAY]})
        assert form.to_goal_fields()["days_of_week"] == ["saturday"]

    def test_single_step_goal_forces_one_step(self):
        form = GoalForm.parse({"title": "Read", "is_multi_step": False, "total_steps": 7})
        assert form.total_steps == 1

    def test_multi_step_keeps_step_count(self):
        form = GoalForm.parse({"title": "Water", "is_multi_step": True, "total_steps": 8})
        assert form.to_goal_fields()["total_steps"] == 8

    @pytest.mark.parametrize(
        ("payload", "field"),
        [
            ({}, "title"),
            ({"title": "   "}, "title"),
            ({"title": "x", "days_of_week": []}, "days_of_week"),
            ({"title": "x", "days_of_week": "someday"}, "days_of_week"),
            ({"title": "x", "goal_type": "monthly"}, "goal_type"),
            ({"title": "x", "is_multi_step": True, "total_steps": 0}, "total_steps"),
        ],
    )
    def test_invalid_payloads(self, payload, field):
        with pytest.raises(InvalidGoal) as excinfo:
            GoalForm.parse(payload)
        assert field in excinfo.value.errors
        assert excinfo.value.to_dict()["fields"] == excinfo.value.errors


class TestGoalUpdateForm:
    def test_only_provided_fields_change(self):
        form = GoalUpdateForm.parse({"title": "New title"})
        assert form.changes() == {"title": "New title"}

    def test_days_are_normalized(self):
        form = GoalUpdateForm.parse({"days_of_week": ["saturday", "sunday"]})
        assert form.changes() == {"days_of_week": ["sunday", "saturday"]}

    def test_empty_days_rejected(self):
        with pytest.raises(InvalidGoal):
            GoalUpdateForm.parse({"days_of_week": []})

    def test_empty_title_rejected(self):
        with pytest.raises(InvalidGoal):
            GoalUpdateForm.parse({"title": ""})
