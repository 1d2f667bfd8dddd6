"""Habits JSON API controllers (thin, schema-validated)."""

from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from pydantic import ValidationError

from streakline.core.errors import ValidationError as DomainValidationError
from streakline.core.utils.decorators import csrf_protected, current_user_id
from streakline.domains.habits import services as habit_services
from streakline.domains.habits.schemas.habit_schemas import (
    HabitCreate,
    HabitLogBodyCreate,
    HabitLogCreate,
    HabitLogResponse,
    HabitResponse,
    HabitStreakResponse,
    HabitUpdate,
    parse_day,
)

habit_api_bp = Blueprint("habit_api", __name__)


def _jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors(include_url=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


def _invalid(exc: ValidationError):
    return (
        jsonify({"ok": False, "error": "validation_error", "details": _jsonable_errors(exc)}),
        400,
    )


def day_arg(name: str) -> Optional[date]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return parse_day(raw, name)
    except ValueError as exc:
        raise DomainValidationError(str(exc)) from None


def _habit_payload(habit) -> dict:
    return HabitResponse.model_validate(habit).model_dump(mode="json")


def _log_payload(log) -> dict:
    return HabitLogResponse.model_validate(log).model_dump(mode="json")


def streak_rows(user_id: int, today: Optional[date]) -> list[dict]:
    rows = habit_services.compute_streaks(user_id, today=today)
    return [
        HabitStreakResponse(
            **HabitResponse.model_validate(row["habit"]).model_dump(),
            current_streak=row["current_streak"],
            completed_today=row["completed_today"],
            last_logged_date=row["last_logged_date"],
        ).model_dump(mode="json")
        for row in rows
    ]


@habit_api_bp.get("")
@jwt_required()
def list_habits():
    habits = habit_services.list_habits(current_user_id())
    return jsonify({"ok": True, "habits": [_habit_payload(h) for h in habits]})


@habit_api_bp.post("")
@jwt_required()
@csrf_protected
def create_habit():
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitCreate.model_validate(payload)
    except ValidationError as exc:
        return _invalid(exc)
    habit = habit_services.create_habit(current_user_id(), **data.model_dump())
    return jsonify({"ok": True, "habit": _habit_payload(habit)}), 201


@habit_api_bp.get("/streaks")
@jwt_required()
def habit_streaks():
    today = day_arg("today")
    return jsonify({"ok": True, "habits": streak_rows(current_user_id(), today)})


@habit_api_bp.get("/<int:habit_id>")
@jwt_required()
def habit_detail(habit_id: int):
    habit = habit_services.get_owned_habit(habit_id, current_user_id())
    return jsonify({"ok": True, "habit": _habit_payload(habit)})


@habit_api_bp.route("/<int:habit_id>", methods=["PATCH", "PUT"])
@jwt_required()
@csrf_protected
def update_habit(habit_id: int):
    user_id = current_user_id()
    # Ownership is decided before the payload is looked at.
    habit_services.get_owned_habit(habit_id, user_id)
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitUpdate.model_validate(payload)
    except ValidationError as exc:
        return _invalid(exc)
    habit_services.update_habit(habit_id, user_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True})


@habit_api_bp.delete("/<int:habit_id>")
@jwt_required()
@csrf_protected
def delete_habit(habit_id: int):
    habit_services.delete_habit(habit_id, current_user_id())
    return jsonify({"ok": True})


def _record(user_id: int, habit_id: int, data: HabitLogCreate):
    log, created = habit_services.record_log(
        user_id,
        habit_id,
        logged_date=data.logged_date,
        bool_value=data.bool_value,
        numeric_value=data.numeric_value,
        note=data.note,
    )
    body = {"ok": True, "log_id": log.id, "created": created, "log": _log_payload(log)}
    return jsonify(body), 201 if created else 200


@habit_api_bp.post("/<int:habit_id>/logs")
@jwt_required()
@csrf_protected
def create_log(habit_id: int):
    user_id = current_user_id()
    habit_services.get_owned_habit(habit_id, user_id)
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitLogCreate.model_validate(payload)
    except ValidationError as exc:
        return _invalid(exc)
    return _record(user_id, habit_id, data)


@habit_api_bp.post("/log")
@jwt_required()
@csrf_protected
def log_habit():
    """Record a log with the habit id in the body instead of the path."""
    user_id = current_user_id()
    payload = request.get_json(silent=True) or {}
    habit_id = payload.get("habit_id") if isinstance(payload, dict) else None
    if isinstance(habit_id, int) and not isinstance(habit_id, bool):
        habit_services.get_owned_habit(habit_id, user_id)
    try:
        data = HabitLogBodyCreate.model_validate(payload)
    except ValidationError as exc:
        return _invalid(exc)
    return _record(user_id, data.habit_id, data)


@habit_api_bp.get("/<int:habit_id>/logs")
@jwt_required()
def list_logs(habit_id: int):
    user_id = current_user_id()
    habit_services.get_owned_habit(habit_id, user_id)
    logs = habit_services.list_logs(
        user_id, habit_id, start=day_arg("start"), end=day_arg("end")
    )
    return jsonify({"ok": True, "logs": [_log_payload(log) for log in logs]})


@habit_api_bp.get("/<int:habit_id>/streak")
@jwt_required()
def habit_streak(habit_id: int):
    habit = habit_services.get_owned_habit(habit_id, current_user_id())
    streak = habit_services.compute_streak(habit, today=day_arg("today"))
    return jsonify({"ok": True, "habit_id": habit.id, "current_streak": streak})
