"""Habit catalog: create, read, update and delete habit definitions."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from flask import current_app

from streakline.core.errors import Forbidden, NotFound, ValidationError
from streakline.domains.habits.constants import (
    HABIT_TYPE_MEASURABLE,
    HABIT_TYPES,
    UPDATABLE_HABIT_FIELDS,
)
from streakline.domains.habits.models.habit_models import Habit
from streakline.extensions import db

logger = logging.getLogger(__name__)


def _name_max_length() -> int:
    return int(current_app.config.get("HABIT_NAME_MAX_LENGTH", 255))


def _clean_name(name: Optional[str]) -> str:
    name_norm = (name or "").strip()
    if not name_norm:
        raise ValidationError("Habit name is required.")
    if len(name_norm) > _name_max_length():
        raise ValidationError(f"Habit name must be at most {_name_max_length()} characters.")
    return name_norm


def _clean_goal(goal: object) -> Decimal:
    if goal is None or isinstance(goal, bool):
        raise ValidationError("A measurable habit requires a goal greater than 0.")
    try:
        value = Decimal(str(goal))
    except (InvalidOperation, ValueError):
        raise ValidationError("Goal must be a number.") from None
    if not value.is_finite() or value <= 0:
        raise ValidationError("A measurable habit requires a goal greater than 0.")
    return value


def create_habit(
    user_id: int,
    *,
    name: str,
    habit_type: str,
    description: str | None = None,
    goal: float | None = None,
    created_at: datetime | None = None,
) -> Habit:
    if habit_type not in HABIT_TYPES:
        raise ValidationError(f"Invalid habit type. Expected one of: {', '.join(HABIT_TYPES)}.")
    habit = Habit(
        user_id=user_id,
        name=_clean_name(name),
        description=(description or "").strip() or None,
        habit_type=habit_type,
        goal=_clean_goal(goal) if habit_type == HABIT_TYPE_MEASURABLE else None,
        created_at=created_at or datetime.utcnow(),
    )
    db.session.add(habit)
    db.session.commit()
    logger.info("User %s created %s habit %s", user_id, habit_type, habit.id)
    return habit


def get_habit(habit_id: int) -> Habit:
    habit = db.session.get(Habit, habit_id)
    if habit is None:
        raise NotFound(f"Habit with id {habit_id} not found.")
    return habit


def get_owned_habit(habit_id: int, caller_id: int) -> Habit:
    """Load a habit and require that ``caller_id`` owns it.

    Ownership is the only rule; roles (admin included) grant nothing here.
    """
    habit = get_habit(habit_id)
    if habit.user_id != caller_id:
        raise Forbidden("You do not have permission to access this habit.")
    return habit


def list_habits(user_id: int) -> List[Habit]:
    return (
        Habit.query.filter_by(user_id=user_id)
        .order_by(Habit.created_at.desc(), Habit.id.desc())
        .all()
    )


def update_habit(habit_id: int, caller_id: int, **fields) -> Habit:
    """Apply a partial update; only the keys present in ``fields`` change."""
    habit = get_owned_habit(habit_id, caller_id)

    supplied = {key: fields[key] for key in UPDATABLE_HABIT_FIELDS if key in fields}
    unknown = set(fields) - set(UPDATABLE_HABIT_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}.")
    if not supplied:
        raise ValidationError("At least one field must be provided for update.")

    changes: dict[str, object] = {}
    if "name" in supplied:
        changes["name"] = _clean_name(supplied["name"])
    if "description" in supplied:
        changes["description"] = (supplied["description"] or "").strip() or None
    if "goal" in supplied:
        if habit.habit_type == HABIT_TYPE_MEASURABLE:
            changes["goal"] = _clean_goal(supplied["goal"])
        # Goal carries no meaning for other types; keep it NULL.

    for key, val in changes.items():
        setattr(habit, key, val)
    db.session.commit()
    logger.info("User %s updated habit %s fields=%s", caller_id, habit_id, sorted(supplied))
    return habit


def delete_habit(habit_id: int, caller_id: int) -> None:
    habit = get_owned_habit(habit_id, caller_id)
    # Logs go with the habit: ORM delete-orphan cascade plus ON DELETE CASCADE.
    db.session.delete(habit)
    db.session.commit()
    logger.info("User %s deleted habit %s", caller_id, habit_id)


__all__ = [
    "create_habit",
    "get_habit",
    "get_owned_habit",
    "list_habits",
    "update_habit",
    "delete_habit",
]
