"""Habit services: catalog, daily logs and streaks."""

from streakline.domains.habits.services.catalog_service import (
    create_habit,
    delete_habit,
    get_habit,
    get_owned_habit,
    list_habits,
    update_habit,
)
from streakline.domains.habits.services.log_service import list_logs, record_log
from streakline.domains.habits.services.streak_service import (
    abstinence_streak,
    completed_dates,
    completion_streak,
    compute_streak,
    compute_streaks,
    completed_on,
    current_streak,
    utc_today,
)

__all__ = [
    "create_habit",
    "delete_habit",
    "get_habit",
    "get_owned_habit",
    "list_habits",
    "update_habit",
    "record_log",
    "list_logs",
    "abstinence_streak",
    "completion_streak",
    "completed_dates",
    "current_streak",
    "completed_on",
    "utc_today",
    "compute_streak",
    "compute_streaks",
]
