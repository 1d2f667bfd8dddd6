"""Habit type codes and streak modes."""

from __future__ import annotations

# A day is either done or not.
HABIT_TYPE_YES_NO = "yes_no"
# A daily amount measured against a positive goal.
HABIT_TYPE_MEASURABLE = "measurable"
# Abstinence tracking: a log row records a relapse.
HABIT_TYPE_QUIT = "quit"

HABIT_TYPES = (HABIT_TYPE_YES_NO, HABIT_TYPE_MEASURABLE, HABIT_TYPE_QUIT)

MEASURABLE_MODE_GOAL = "goal"
MEASURABLE_MODE_LEGACY = "legacy"
MEASURABLE_MODES = (MEASURABLE_MODE_GOAL, MEASURABLE_MODE_LEGACY)

UPDATABLE_HABIT_FIELDS = ("name", "description", "goal")

__all__ = [
    "HABIT_TYPE_YES_NO",
    "HABIT_TYPE_MEASURABLE",
    "HABIT_TYPE_QUIT",
    "HABIT_TYPES",
    "MEASURABLE_MODE_GOAL",
    "MEASURABLE_MODE_LEGACY",
    "MEASURABLE_MODES",
    "UPDATABLE_HABIT_FIELDS",
]
