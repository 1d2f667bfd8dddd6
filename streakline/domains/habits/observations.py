"""Typed daily observations, one variant per habit type.

A log row stores ``bool_value`` and ``numeric_value`` side by side; only one is
meaningful for a given habit type. ``observation_for`` is the single place that
decides which, so the recorder never persists a mismatched pair.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Optional, Union

from streakline.core.errors import ValidationError
from streakline.domains.habits.constants import (
    HABIT_TYPE_MEASURABLE,
    HABIT_TYPE_QUIT,
    HABIT_TYPE_YES_NO,
)


@dataclass(frozen=True)
class YesNoObservation:
    done: bool

    def columns(self) -> tuple[Optional[bool], Optional[Decimal]]:
        return self.done, None


@dataclass(frozen=True)
class MeasurableObservation:
    amount: float

    def columns(self) -> tuple[Optional[bool], Optional[Decimal]]:
        return None, Decimal(str(self.amount))


@dataclass(frozen=True)
class QuitObservation:
    relapsed: bool

    def columns(self) -> tuple[Optional[bool], Optional[Decimal]]:
        return self.relapsed, None


# Largest magnitude a Numeric(12, 2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")

Observation = Union[YesNoObservation, MeasurableObservation, QuitObservation]


def _is_number(value: object) -> bool:
    # bool is an int subclass; a checkbox value is not an amount.
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def observation_for(
    habit_type: str,
    bool_value: object = None,
    numeric_value: object = None,
) -> Observation:
    """Build the observation a habit of ``habit_type`` accepts, or raise."""
    if habit_type == HABIT_TYPE_YES_NO:
        if not isinstance(bool_value, bool):
            raise ValidationError("This habit requires a boolean value (true/false).")
        return YesNoObservation(done=bool_value)
    if habit_type == HABIT_TYPE_QUIT:
        if not isinstance(bool_value, bool):
            raise ValidationError("A quit habit must be logged with a boolean value.")
        return QuitObservation(relapsed=bool_value)
    if habit_type == HABIT_TYPE_MEASURABLE:
        if not _is_number(numeric_value):
            raise ValidationError("This habit requires a numeric value.")
        if abs(Decimal(str(numeric_value))) > MAX_AMOUNT:
            raise ValidationError("numeric_value is out of range.")
        return MeasurableObservation(amount=float(numeric_value))  # type: ignore[arg-type]
    raise ValidationError(f"Unknown habit type: {habit_type}")


__all__ = [
    "Observation",
    "YesNoObservation",
    "MeasurableObservation",
    "QuitObservation",
    "observation_for",
]
