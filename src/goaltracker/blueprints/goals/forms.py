"""Goal form definitions."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ...errors import InvalidGoal
from ...models.goal import DAYS_OF_WEEK, DayOfWeek, GoalType


def _split_days(value: Any) -> Any:
    """Accept comma-separated day strings as well as lists."""

    if isinstance(value, str):
        return [part.strip().lower() for part in value.split(",") if part.strip()]
    if isinstance(value, Iterable):
        return [
            (part.value if isinstance(part, Enum) else str(part)).strip().lower() for part in value
        ]
    return value


def _structured_errors(exc: ValidationError) -> dict[str, list[str]]:
    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


class GoalForm(BaseModel):
    """Payload for creating a goal."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(description="Short label for the goal", max_length=120)
    description: str = Field(default="", description="Optional details", max_length=400)
    goal_type: GoalType = Field(default=GoalType.DAILY, description="Daily or weekly cadence")
    days_of_week: list[DayOfWeek] = Field(
        default_factory=lambda: list(DAYS_OF_WEEK),
        description="Days a daily goal is scheduled on",
    )
    is_multi_step: bool = Field(default=False, description="Track discrete steps")
    total_steps: int = Field(default=1, ge=1, le=100, description="Steps per occurrence")

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value:
            raise ValueError("Please provide a goal title.")
        return value

    @field_validator("days_of_week", mode="before")
    @classmethod
    def split_days(cls, value: Any) -> Any:
        return _split_days(value)

    @field_validator("days_of_week")
    @classmethod
    def require_days(cls, value: list[DayOfWeek]) -> list[DayOfWeek]:
        if not value:
            raise ValueError("Pick at least one day of the week.")
        # keep Sunday-first order without duplicates
        return [day for day in DAYS_OF_WEEK if day in value]

    @model_validator(mode="after")
    def normalize_steps(self) -> "GoalForm":
        if not self.is_multi_step:
            self.total_steps = 1
        return self

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> "GoalForm":
        """Validate ``data`` or raise :class:`InvalidGoal` with per-field messages."""

        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise InvalidGoal(_structured_errors(exc)) from exc

    def to_goal_fields(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "goal_type": self.goal_type,
            "days_of_week": [day.value for day in self.days_of_week],
            "is_multi_step": self.is_multi_step,
            "total_steps": self.total_steps,
        }


class GoalUpdateForm(BaseModel):
    """Partial update payload; only the provided fields change."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=400)
    goal_type: Optional[GoalType] = None
    days_of_week: Optional[list[DayOfWeek]] = None
    is_multi_step: Optional[bool] = None
    total_steps: Optional[int] = Field(default=None, ge=1, le=100)
    is_active: Optional[bool] = None

    @field_validator("days_of_week", mode="before")
    @classmethod
    def split_days(cls, value: Any) -> Any:
        if value is None:
            return value
        return _split_days(value)

    @field_validator("days_of_week")
    @classmethod
    def require_days(cls, value: Optional[list[DayOfWeek]]) -> Optional[list[DayOfWeek]]:
        if value is not None and not value:
            raise ValueError("Pick at least one day of the week.")
        return value

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> "GoalUpdateForm":
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise InvalidGoal(_structured_errors(exc)) from exc

    def changes(self) -> dict[str, Any]:
        """Return the explicitly provided fields, ready to set on a Goal."""

        changes = self.model_dump(exclude_unset=True, exclude_none=True)
        if "days_of_week" in changes:
            changes["days_of_week"] = [
                day.value for day in DAYS_OF_WEEK if day in (self.days_of_week or [])
            ]
        return changes


__all__ = ["GoalForm", "GoalUpdateForm"]
