"""Read-modify-write orchestration of goal occurrences.

:class:`GoalTracker` is built per request from the repositories and the
acting user's id. Each mutation loads the goal once, validates that the
requested operation fits the goal's shape, reads the current occurrence
record (or the zero default), runs one transition from
:mod:`goaltracker.services.completion` and upserts the result. Nothing is
written when validation fails or when the transition is a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..domain.repositories import DailyStatusRepository, GoalRepository, WeeklyStatusRepository
from ..errors import GoalNotFound, GoalNotScheduled
from ..logging_config import get_logger
from ..models.goal import Goal, GoalType
from . import completion
from .batch import BatchLoader, DateData, WeekData
from .completion import CompletionState, IncrementOutcome
from .dates import format_date, week_start
from .occurrences import is_scheduled

if TYPE_CHECKING:  # pragma: no cover
    from ..blueprints.goals.forms import GoalForm

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class MutationResult:
    """Outcome of one mutation: the reported boolean plus the stored state."""

    goal_id: str
    day: date
    state: bool
    status: CompletionState
    outcome: Optional[IncrementOutcome] = None

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "goal_id": self.goal_id,
            "date": format_date(self.day),
            "state": self.state,
            "status": self.status.to_dict(),
        }
        if self.outcome is not None:
            payload["outcome"] = self.outcome.value
        return payload


class GoalTracker:
    """User-scoped entry point for goal reads, mutations and CRUD."""

    def __init__(
        self,
        goal_repo: GoalRepository,
        daily_repo: DailyStatusRepository,
        weekly_repo: WeeklyStatusRepository,
        *,
        user_id: str,
        clock: Clock | None = None,
    ):
        self.goal_repo = goal_repo
        self.daily_repo = daily_repo
        self.weekly_repo = weekly_repo
        self.user_id = user_id
        self.clock = clock or utc_now
        self.loader = BatchLoader(goal_repo, daily_repo, weekly_repo, user_id=user_id)

    # Occurrence plumbing -------------------------------------------------

    def _require_goal(self, goal_id: str, *, include_inactive: bool = False) -> Goal:
        goal = self.goal_repo.get_by_id(
            goal_id, user_id=self.user_id, include_inactive=include_inactive
        )
        if goal is None:
            raise GoalNotFound(goal_id)
        return goal

    def _require_scheduled(self, goal: Goal, day: date) -> None:
        if not is_scheduled(goal, day):
            raise GoalNotScheduled(f"Goal {goal.id!r} is not scheduled on {format_date(day)}")

    def _read(self, goal: Goal, day: date) -> CompletionState:
        if goal.is_weekly:
            stored = self.weekly_repo.get(goal.id, week_start(day), user_id=self.user_id)
        else:
            stored = self.daily_repo.get(goal.id, day, user_id=self.user_id)
        return completion.read_effective(goal, stored, day).status

    def _write(self, goal: Goal, day: date, state: CompletionState) -> CompletionState:
        if goal.is_weekly:
            return self.weekly_repo.upsert(goal.id, week_start(day), state, user_id=self.user_id)
        return self.daily_repo.upsert(goal.id, day, state, user_id=self.user_id)

    def _log(self, action: str, goal: Goal, day: date, **fields: Any) -> None:
        period = week_start(day) if goal.is_weekly else day
        logger.info(
            "Goal occurrence updated",
            extra={
                "action": action,
                "goal_id": goal.id,
                "goal_type": GoalType(goal.goal_type).value,
                "period": format_date(period),
                "user_id": self.user_id,
                **fields,
            },
        )

    # Mutations -----------------------------------------------------------

    def toggle(self, goal_id: str, day: date) -> MutationResult:
        """Flip whole-occurrence completion; returns the new ``completed``."""

        goal = self._require_goal(goal_id)
        self._require_scheduled(goal, day)

        current = self._read(goal, day)
        new_state, completed = completion.toggle_simple(goal, current, self.clock())
        stored = self._write(goal, day, new_state)
        self._log("toggle", goal, day, completed=completed)
        return MutationResult(goal_id=goal.id, day=day, state=completed, status=stored)

    def toggle_step(self, goal_id: str, day: date, step_index: int) -> MutationResult:
        """Flip one step; returns whether that step is now filled."""

        goal = self._require_goal(goal_id)
        completion.require_step_index(goal, step_index)
        self._require_scheduled(goal, day)

        current = self._read(goal, day)
        new_state, filled = completion.toggle_step(
            goal, current, step_index, self.clock(), weekly=goal.is_weekly
        )
        stored = self._write(goal, day, new_state)
        self._log("toggle_step", goal, day, step_index=step_index, filled=filled)
        return MutationResult(goal_id=goal.id, day=day, state=filled, status=stored)

    def increment(self, goal_id: str, day: date) -> MutationResult:
        """Advance a multi-step occurrence by one step.

        Daily occurrences wrap to zero once full. Weekly occurrences accept
        one increment per calendar day; repeating it on the same day undoes it.
        """

        goal = self._require_goal(goal_id)
        completion.require_incrementable(goal)
        self._require_scheduled(goal, day)

        current = self._read(goal, day)
        now = self.clock()
        if goal.is_weekly:
            new_state, outcome = completion.increment_weekly(goal, current, day, now)
        else:
            new_state, outcome = completion.increment_daily(goal, current, now)

        if not outcome.applied:
            logger.info(
                "Increment undo found no filled step",
                extra={"goal_id": goal.id, "date": format_date(day)},
            )
            return MutationResult(
                goal_id=goal.id, day=day, state=False, status=current, outcome=outcome
            )

        stored = self._write(goal, day, new_state)
        self._log("increment", goal, day, outcome=outcome.value)
        return MutationResult(
            goal_id=goal.id, day=day, state=True, status=stored, outcome=outcome
        )

    def snooze(self, goal_id: str, day: date) -> MutationResult:
        """Flip the snooze flag of a daily occurrence; returns the new flag."""

        goal = self._require_goal(goal_id)
        completion.require_snoozable(goal)
        self._require_scheduled(goal, day)

        current = self._read(goal, day)
        new_state, snoozed = completion.toggle_snooze(goal, current)
        stored = self._write(goal, day, new_state)
        self._log("snooze", goal, day, snoozed=snoozed)
        return MutationResult(goal_id=goal.id, day=day, state=snoozed, status=stored)

    # Views ---------------------------------------------------------------

    def daily_view(self, day: date) -> DateData:
        return self.loader.load_date(day)

    def week_view(self, start: date) -> WeekData:
        return self.loader.load_week(start)

    # Goal definitions ----------------------------------------------------

    def list_goals(self, *, include_inactive: bool = False) -> list[Goal]:
        return self.goal_repo.list_all(user_id=self.user_id, include_inactive=include_inactive)

    def get_goal(self, goal_id: str) -> Goal:
        return self._require_goal(goal_id)

    def create_goal(self, form: "GoalForm") -> Goal:
        goal = Goal(user_id=self.user_id, **form.to_goal_fields())
        created = self.goal_repo.create(goal, user_id=self.user_id)
        logger.info("Goal created", extra={"goal_id": created.id, "user_id": self.user_id})
        return created

    def update_goal(self, goal_id: str, changes: dict[str, Any]) -> Goal:
        """Apply ``changes``; setting ``is_active`` to True restores an archived goal."""

        goal = self._require_goal(goal_id, include_inactive=changes.get("is_active") is True)
        for key, value in changes.items():
            setattr(goal, key, value)
        if not goal.is_multi_step:
            goal.total_steps = 1
        updated = self.goal_repo.update(goal, user_id=self.user_id)
        logger.info(
            "Goal updated",
            extra={"goal_id": goal_id, "fields": sorted(changes), "user_id": self.user_id},
        )
        return updated

    def archive_goal(self, goal_id: str) -> None:
        if not self.goal_repo.archive(goal_id, user_id=self.user_id):
            raise GoalNotFound(goal_id)
        logger.info("Goal archived", extra={"goal_id": goal_id, "user_id": self.user_id})


__all__ = ["Clock", "GoalTracker", "MutationResult", "utc_now"]
