"""Completion state machine for goal occurrences.

Every transition here is a pure function: it receives the already-resolved
:class:`~goaltracker.models.goal.Goal`, the current :class:`CompletionState`
(or the zero default from :func:`read_effective`) and the timestamp to stamp
filled steps with, and returns a *new* state plus the value reported back to
the caller. Persistence is handled by :mod:`goaltracker.services.tracker`.

``step_completions`` is a sparse ledger: each slot holds the time the step
was completed or ``None``. ``completed_steps`` is always the number of
occupied slots, never the list length.

Daily occurrences keep at most ``total_steps`` slots and are complete when
every slot is filled. Weekly occurrences may grow past ``total_steps``
(over-completion) and are complete once at least ``total_steps`` slots are
filled. Weekly increments are limited to one per calendar day through the
``daily_increments`` ledger; a second increment on the same day undoes the
first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from ..errors import InvalidStepIndex, NotEligibleForIncrement, NotMultiStep, WeeklyNotSnoozable
from ..models.goal import Goal
from .dates import format_date


@dataclass(slots=True)
class CompletionState:
    """In-memory completion record for one occurrence."""

    completed: bool = False
    completed_at: Optional[datetime] = None
    completed_steps: int = 0
    step_completions: list[Optional[datetime]] = field(default_factory=list)
    snoozed: bool = False
    daily_increments: dict[str, bool] = field(default_factory=dict)

    def copy(self) -> "CompletionState":
        return CompletionState(
            completed=self.completed,
            completed_at=self.completed_at,
            completed_steps=self.completed_steps,
            step_completions=list(self.step_completions),
            snoozed=self.snoozed,
            daily_increments=dict(self.daily_increments),
        )

    def incremented_on(self, day: date) -> bool:
        return bool(self.daily_increments.get(format_date(day), False))

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "completed_steps": self.completed_steps,
            "step_completions": [
                stamp.isoformat() if stamp else None for stamp in self.step_completions
            ],
            "snoozed": self.snoozed,
        }


class IncrementOutcome(str, Enum):
    """What an increment call did to the occurrence."""

    INCREMENTED = "incremented"
    RESET = "reset"
    UNDONE = "undone"
    OVER_COMPLETED = "over_completed"
    NOOP = "noop"

    @property
    def applied(self) -> bool:
        return self is not IncrementOutcome.NOOP


@dataclass(slots=True)
class GoalStatusView:
    """A goal paired with its effective state on one date."""

    goal: Goal
    day: date
    status: CompletionState

    @property
    def daily_incremented(self) -> bool:
        return self.status.incremented_on(self.day)

    def to_dict(self) -> dict:
        payload = self.goal.to_dict()
        payload.update(self.status.to_dict())
        if self.goal.is_weekly:
            payload["daily_incremented"] = self.daily_incremented
        return payload


def read_effective(goal: Goal, state: CompletionState | None, day: date) -> GoalStatusView:
    """Return the state to display for ``goal`` on ``day``.

    Missing records read as the zero state; nothing is written. Stored counts
    are recomputed against the goal's current step count, since the goal may
    have been edited after the record was written.
    """

    if state is None:
        return GoalStatusView(goal=goal, day=day, status=CompletionState())
    return GoalStatusView(goal=goal, day=day, status=_rederived(goal, state))


def _count_filled(slots: list[Optional[datetime]]) -> int:
    return sum(1 for slot in slots if slot)


def _rederived(goal: Goal, state: CompletionState) -> CompletionState:
    result = state.copy()
    steps = goal.step_count
    if goal.is_weekly:
        filled = _count_filled(result.step_completions)
        completed = filled >= steps
    else:
        filled = _count_filled(result.step_completions[:steps])
        completed = filled == steps
    result.completed_steps = filled
    result.completed = completed
    if not completed:
        result.completed_at = None
    elif result.completed_at is None:
        result.completed_at = max(slot for slot in result.step_completions if slot)
    return result


def _padded(slots: list[Optional[datetime]], length: int) -> list[Optional[datetime]]:
    padded = list(slots)
    while len(padded) < length:
        padded.append(None)
    return padded


def _settle(
    state: CompletionState,
    slots: list[Optional[datetime]],
    goal: Goal,
    now: datetime,
    *,
    weekly: bool,
) -> None:
    """Recompute the derived fields of ``state`` from ``slots``."""

    if weekly:
        filled = _count_filled(slots)
        completed = filled >= goal.total_steps
    else:
        filled = _count_filled(slots[: goal.total_steps])
        completed = filled == goal.total_steps
    state.step_completions = slots
    state.completed_steps = filled
    state.completed = completed
    state.completed_at = now if completed else None


def _clear(state: CompletionState) -> None:
    state.completed = False
    state.completed_at = None
    state.completed_steps = 0
    state.step_completions = []


def toggle_simple(goal: Goal, state: CompletionState, now: datetime) -> tuple[CompletionState, bool]:
    """Flip overall completion, filling or clearing every step at once."""

    new_state = state.copy()
    if state.completed:
        _clear(new_state)
        return new_state, False

    steps = goal.step_count
    new_state.completed = True
    new_state.completed_at = now
    new_state.completed_steps = steps
    new_state.step_completions = [now] * steps
    return new_state, True


def require_step_index(goal: Goal, step_index: int) -> None:
    if not goal.is_multi_step:
        raise NotMultiStep(f"Goal {goal.id!r} is not a multi-step goal")
    if step_index < 0 or step_index >= goal.total_steps:
        raise InvalidStepIndex(step_index, goal.total_steps)


def toggle_step(
    goal: Goal,
    state: CompletionState,
    step_index: int,
    now: datetime,
    *,
    weekly: bool = False,
) -> tuple[CompletionState, bool]:
    """Flip one step slot; returns True when the slot is now filled."""

    require_step_index(goal, step_index)

    new_state = state.copy()
    slots = _padded(state.step_completions, goal.total_steps)
    was_filled = bool(slots[step_index])
    slots[step_index] = None if was_filled else now
    _settle(new_state, slots, goal, now, weekly=weekly)
    return new_state, not was_filled


def require_incrementable(goal: Goal) -> None:
    if not goal.is_multi_step or goal.total_steps <= 1:
        raise NotEligibleForIncrement(
            f"Goal {goal.id!r} needs more than one step to be incremented"
        )


def _first_empty(slots: list[Optional[datetime]], limit: int) -> int:
    for index, slot in enumerate(slots[:limit]):
        if not slot:
            return index
    return -1


def increment_daily(
    goal: Goal, state: CompletionState, now: datetime
) -> tuple[CompletionState, IncrementOutcome]:
    """Fill the next step of a daily occurrence, wrapping to zero when full."""

    require_incrementable(goal)

    new_state = state.copy()
    slots = _padded(state.step_completions, goal.total_steps)
    if _count_filled(slots[: goal.total_steps]) >= goal.total_steps:
        _settle(new_state, [None] * goal.total_steps, goal, now, weekly=False)
        return new_state, IncrementOutcome.RESET

    slots[_first_empty(slots, goal.total_steps)] = now
    _settle(new_state, slots, goal, now, weekly=False)
    return new_state, IncrementOutcome.INCREMENTED


def increment_weekly(
    goal: Goal, state: CompletionState, day: date, now: datetime
) -> tuple[CompletionState, IncrementOutcome]:
    """Apply or undo the single increment allowed on ``day`` for a weekly occurrence.

    The undo branch clears the highest filled slot in the whole ledger, which
    may be a slot filled by :func:`toggle_step` rather than by this day's
    increment.
    """

    require_incrementable(goal)

    key = format_date(day)
    new_state = state.copy()
    slots = _padded(state.step_completions, goal.total_steps)

    if new_state.daily_increments.get(key):
        filled = [index for index, slot in enumerate(slots) if slot]
        if not filled:
            return state.copy(), IncrementOutcome.NOOP
        slots[filled[-1]] = None
        new_state.daily_increments[key] = False
        _settle(new_state, slots, goal, now, weekly=True)
        return new_state, IncrementOutcome.UNDONE

    if _count_filled(slots) >= goal.total_steps:
        slots.append(now)
        new_state.daily_increments[key] = True
        _settle(new_state, slots, goal, now, weekly=True)
        return new_state, IncrementOutcome.OVER_COMPLETED

    slots[_first_empty(slots, goal.total_steps)] = now
    new_state.daily_increments[key] = True
    _settle(new_state, slots, goal, now, weekly=True)
    return new_state, IncrementOutcome.INCREMENTED


def require_snoozable(goal: Goal) -> None:
    if goal.is_weekly:
        raise WeeklyNotSnoozable(f"Goal {goal.id!r} is weekly and cannot be snoozed")


def toggle_snooze(goal: Goal, state: CompletionState) -> tuple[CompletionState, bool]:
    """Flip the snooze flag of a daily occurrence.

    Entering snooze drops all progress; leaving it does not restore it.
    """

    require_snoozable(goal)

    new_state = state.copy()
    new_state.snoozed = not state.snoozed
    if new_state.snoozed:
        _clear(new_state)
    return new_state, new_state.snoozed


__all__ = [
    "CompletionState",
    "GoalStatusView",
    "IncrementOutcome",
    "increment_daily",
    "increment_weekly",
    "read_effective",
    "require_incrementable",
    "require_snoozable",
    "require_step_index",
    "toggle_simple",
    "toggle_snooze",
    "toggle_step",
]
