"""Streak calculator.

The functions at the top are pure: they take the habit, its logs and the
evaluation date, and never touch the session or the clock. ``compute_streak``
and ``compute_streaks`` read from the database and pick "today" when the caller
does not pin it.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from flask import current_app

from streakline.domains.habits.constants import (
    HABIT_TYPE_MEASURABLE,
    HABIT_TYPE_QUIT,
    HABIT_TYPE_YES_NO,
    MEASURABLE_MODE_GOAL,
    MEASURABLE_MODES,
)
from streakline.domains.habits.models.habit_models import Habit, HabitLog
from streakline.domains.habits.services.catalog_service import list_habits

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def completion_streak(completed: Iterable[date], today: date) -> int:
    """Unbroken run of completed days ending today, or yesterday if today is open."""
    days = set(completed)
    cursor = today
    if cursor not in days:
        cursor -= ONE_DAY
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= ONE_DAY
    return streak


def abstinence_streak(
    created_at: date | datetime, relapse_dates: Iterable[date], today: date
) -> int:
    """Whole days since the latest relapse on or before ``today``.

    Without any relapse the habit's creation date is the anchor.
    """
    past = [_as_day(d) for d in relapse_dates]
    past = [d for d in past if d <= today]
    anchor = max(past) if past else _as_day(created_at)
    return max((today - anchor).days, 0)


def completed_dates(
    habit: Habit, logs: Iterable[HabitLog], *, measurable_mode: str = MEASURABLE_MODE_GOAL
) -> set[date]:
    """Days a yes/no or measurable habit counts as done."""
    if measurable_mode not in MEASURABLE_MODES:
        raise ValueError(f"Unknown measurable streak mode: {measurable_mode}")

    if habit.habit_type == HABIT_TYPE_MEASURABLE and measurable_mode == MEASURABLE_MODE_GOAL:
        if habit.goal is None:
            return set()
        goal = Decimal(str(habit.goal))
        return {
            _as_day(log.logged_date)
            for log in logs
            if log.numeric_value is not None and Decimal(str(log.numeric_value)) >= goal
        }

    # yes/no habits, and measurable habits in legacy mode, only credit true booleans.
    return {_as_day(log.logged_date) for log in logs if log.bool_value is True}


def current_streak(
    habit: Habit,
    logs: Sequence[HabitLog],
    today: date,
    *,
    measurable_mode: str = MEASURABLE_MODE_GOAL,
) -> int:
    if habit.habit_type == HABIT_TYPE_QUIT:
        # Every row of a quit habit is a relapse, whatever its value.
        return abstinence_streak(habit.created_at, (log.logged_date for log in logs), today)
    if habit.habit_type in (HABIT_TYPE_YES_NO, HABIT_TYPE_MEASURABLE):
        return completion_streak(
            completed_dates(habit, logs, measurable_mode=measurable_mode), today
        )
    raise ValueError(f"Unknown habit type: {habit.habit_type}")


def completed_on(
    habit: Habit,
    logs: Sequence[HabitLog],
    day: date,
    *,
    measurable_mode: str = MEASURABLE_MODE_GOAL,
) -> bool:
    """Whether ``day`` counts as a success for the habit.

    For yes/no and measurable habits that means the day is a completed one; a
    false or below-goal log is the same as no log. For quit habits it means no
    relapse was logged that day.
    """
    if habit.habit_type == HABIT_TYPE_QUIT:
        return all(_as_day(log.logged_date) != day for log in logs)
    if habit.habit_type in (HABIT_TYPE_YES_NO, HABIT_TYPE_MEASURABLE):
        return day in completed_dates(habit, logs, measurable_mode=measurable_mode)
    raise ValueError(f"Unknown habit type: {habit.habit_type}")


def utc_today() -> date:
    """Default evaluation day.

    ``created_at`` is stored in UTC, so "today" is the UTC calendar day too.
    """
    return datetime.utcnow().date()


def _measurable_mode() -> str:
    return current_app.config.get("STREAK_MEASURABLE_MODE", MEASURABLE_MODE_GOAL)


def _logs_desc(habit_ids: List[int]) -> List[HabitLog]:
    if not habit_ids:
        return []
    return (
        HabitLog.query.filter(HabitLog.habit_id.in_(habit_ids))
        .order_by(HabitLog.logged_date.desc())
        .all()
    )


def compute_streak(habit: Habit, *, today: Optional[date] = None) -> int:
    return current_streak(
        habit,
        _logs_desc([habit.id]),
        today or utc_today(),
        measurable_mode=_measurable_mode(),
    )


def compute_streaks(user_id: int, *, today: Optional[date] = None) -> List[dict]:
    """Current streak for every habit the user owns.

    One query for the habits, one for all their logs. A habit whose rows cannot
    be evaluated reports ``current_streak=None``; the others are unaffected.
    """
    today = today or utc_today()
    mode = _measurable_mode()
    habits = list_habits(user_id)
    logs_by_habit: Dict[int, List[HabitLog]] = defaultdict(list)
    for log in _logs_desc([h.id for h in habits]):
        logs_by_habit[log.habit_id].append(log)

    payload = []
    for habit in habits:
        logs = logs_by_habit.get(habit.id, [])
        try:
            streak: Optional[int] = current_streak(habit, logs, today, measurable_mode=mode)
            done_today = completed_on(habit, logs, today, measurable_mode=mode)
        except (TypeError, ValueError, ArithmeticError):
            logger.warning("Could not compute streak for habit %s", habit.id, exc_info=True)
            streak = None
            done_today = False
        payload.append(
            {
                "habit": habit,
                "current_streak": streak,
                "completed_today": done_today,
                "last_logged_date": logs[0].logged_date if logs else None,
            }
        )
    return payload


__all__ = [
    "completion_streak",
    "abstinence_streak",
    "completed_dates",
    "current_streak",
    "completed_on",
    "utc_today",
    "compute_streak",
    "compute_streaks",
]
