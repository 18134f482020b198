"""Error taxonomy surfaced by the tracker service and HTTP layer."""

from __future__ import annotations


class GoalTrackerError(Exception):
    """Base class for failures reported to the caller of an operation."""

    code = "goal_tracker_error"
    status_code = 400

    def __init__(self, message: str | None = None) -> None:
        self.message = message or (self.__class__.__doc__ or self.code).strip()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class GoalNotFound(GoalTrackerError):
    """No active goal matches the requested id."""

    code = "not_found"
    status_code = 404

    def __init__(self, goal_id: str) -> None:
        super().__init__(f"Goal {goal_id!r} not found")
        self.goal_id = goal_id


class InvalidStepIndex(GoalTrackerError):
    """Step index outside the goal's step range."""

    code = "invalid_step_index"
    status_code = 400

    def __init__(self, step_index: int, total_steps: int) -> None:
        super().__init__(f"Step index {step_index} is outside [0, {total_steps})")
        self.step_index = step_index
        self.total_steps = total_steps


class NotMultiStep(GoalTrackerError):
    """Step toggling requires a multi-step goal."""

    code = "not_multi_step"
    status_code = 409


class NotEligibleForIncrement(GoalTrackerError):
    """Incrementing requires a multi-step goal with more than one step."""

    code = "not_eligible_for_increment"
    status_code = 409


class WeeklyNotSnoozable(GoalTrackerError):
    """Only daily goals can be snoozed."""

    code = "weekly_not_snoozable"
    status_code = 409


class GoalNotScheduled(GoalTrackerError):
    """Daily goal is not scheduled on the requested day."""

    code = "not_scheduled"
    status_code = 409


class InvalidDate(GoalTrackerError):
    """Dates must be formatted as YYYY-MM-DD."""

    code = "invalid_date"
    status_code = 400


class InvalidGoal(GoalTrackerError):
    """Goal payload failed validation."""

    code = "invalid_goal"
    status_code = 400

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("Goal payload failed validation")
        self.errors = errors

    def to_dict(self) -> dict:
        payload: dict = super().to_dict()
        payload["fields"] = self.errors
        return payload


class InvalidPayload(GoalTrackerError):
    """Request payload is missing a field or has the wrong type."""

    code = "invalid_payload"
    status_code = 400


class StoreUnavailable(GoalTrackerError):
    """The persistence backend failed; retry the whole operation."""

    code = "store_unavailable"
    status_code = 503


__all__ = [
    "GoalTrackerError",
    "GoalNotFound",
    "GoalNotScheduled",
    "InvalidDate",
    "InvalidGoal",
    "InvalidPayload",
    "InvalidStepIndex",
    "NotEligibleForIncrement",
    "NotMultiStep",
    "StoreUnavailable",
    "WeeklyNotSnoozable",
]
