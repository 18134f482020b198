"""Goal routes: JSON views and occurrence mutations."""

from __future__ import annotations

from datetime import date
from typing import Any

from flask import jsonify, request

from ...errors import GoalTrackerError, InvalidPayload
from ...extensions import get_tracker
from ...logging_config import get_logger
from ...services.dates import parse_date, week_start
from . import bp
from .forms import GoalForm, GoalUpdateForm

logger = get_logger(__name__)


def _payload() -> dict[str, Any]:
    """Merge a JSON body (preferred) or form fields into one mapping."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _target_date(payload: dict[str, Any]) -> date:
    return parse_date(payload.get("date") or request.args.get("date"))


def _step_index(payload: dict[str, Any]) -> int:
    raw = payload.get("step_index")
    if raw is None or isinstance(raw, bool):
        raise InvalidPayload("step_index is required")
    if isinstance(raw, float) and not raw.is_integer():
        raise InvalidPayload("step_index must be an integer")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidPayload("step_index must be an integer") from exc


@bp.app_errorhandler(GoalTrackerError)
def handle_goal_error(error: GoalTrackerError):
    if error.status_code >= 500:
        logger.error("Goal operation failed", extra={"error": error.code})
    else:
        logger.info("Goal operation rejected", extra={"error": error.code, "path": request.path})
    return jsonify(error.to_dict()), error.status_code


# Goal definitions ---------------------------------------------------------


@bp.get("/")
def list_goals():
    """List the user's active goals, newest first."""

    include_inactive = request.args.get("include_inactive", "").lower() in {"1", "true", "yes"}
    goals = get_tracker().list_goals(include_inactive=include_inactive)
    return jsonify({"goals": [goal.to_dict() for goal in goals]})


@bp.post("/")
def create_goal():
    form = GoalForm.parse(_payload())
    goal = get_tracker().create_goal(form)
    return jsonify(goal.to_dict()), 201


@bp.get("/<goal_id>")
def get_goal(goal_id: str):
    return jsonify(get_tracker().get_goal(goal_id).to_dict())


@bp.patch("/<goal_id>")
def update_goal(goal_id: str):
    form = GoalUpdateForm.parse(_payload())
    goal = get_tracker().update_goal(goal_id, form.changes())
    return jsonify(goal.to_dict())


@bp.delete("/<goal_id>")
def archive_goal(goal_id: str):
    """Soft-delete a goal; completion history is kept."""

    get_tracker().archive_goal(goal_id)
    return jsonify({"goal_id": goal_id, "is_active": False})


# Views --------------------------------------------------------------------


@bp.get("/daily")
def daily_view():
    """Active, weekly and inactive goals for one date plus completion stats."""

    day = parse_date(request.args.get("date"))
    return jsonify(get_tracker().daily_view(day).to_dict())


@bp.get("/week")
def week_view():
    """All 7 days of a week in one response."""

    start = parse_date(request.args.get("week_start"), default=week_start(date.today()))
    return jsonify(get_tracker().week_view(start).to_dict())


# Mutations ----------------------------------------------------------------


@bp.post("/<goal_id>/toggle")
def toggle(goal_id: str):
    payload = _payload()
    result = get_tracker().toggle(goal_id, _target_date(payload))
    return jsonify(result.to_dict())


@bp.post("/<goal_id>/toggle-step")
def toggle_step(goal_id: str):
    payload = _payload()
    step_index = _step_index(payload)
    result = get_tracker().toggle_step(goal_id, _target_date(payload), step_index)
    return jsonify(result.to_dict())


@bp.post("/<goal_id>/increment")
def increment(goal_id: str):
    payload = _payload()
    result = get_tracker().increment(goal_id, _target_date(payload))
    return jsonify(result.to_dict())


@bp.post("/<goal_id>/snooze")
def snooze(goal_id: str):
    payload = _payload()
    result = get_tracker().snooze(goal_id, _target_date(payload))
    return jsonify(result.to_dict())
