"""Habits dashboard API."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from streakline.core.utils.decorators import current_user_id
from streakline.domains.habits.controllers.habit_api import day_arg, streak_rows
from streakline.domains.habits.services import utc_today

dashboard_api_bp = Blueprint("habit_dashboard_api", __name__)


@dashboard_api_bp.get("/dashboard")
@jwt_required()
def dashboard():
    today = day_arg("today") or utc_today()
    return jsonify(
        {
            "ok": True,
            "today": today.isoformat(),
            "habits": streak_rows(current_user_id(), today),
        }
    )
