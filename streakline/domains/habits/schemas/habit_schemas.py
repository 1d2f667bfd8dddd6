"""Habit DTOs and schemas."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, field_validator

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

Amount = Union[StrictInt, StrictFloat]


def parse_day(value: object, field: str = "date") -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a calendar date."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _ISO_DAY.match(value):
        raise ValueError(f"{field} must be a date in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{field} is not a valid calendar date") from None


class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=4096)
    habit_type: str = Field(max_length=32)
    goal: Optional[Amount] = None


class HabitUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=4096)
    goal: Optional[Amount] = None


class HabitLogCreate(BaseModel):
    logged_date: date
    bool_value: Optional[StrictBool] = None
    numeric_value: Optional[Amount] = None
    note: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("logged_date", mode="before")
    @classmethod
    def _strict_day(cls, value: object) -> date:
        return parse_day(value, "logged_date")


class HabitLogBodyCreate(HabitLogCreate):
    habit_id: StrictInt


class HabitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str]
    habit_type: str
    goal: Optional[float]
    created_at: datetime
    updated_at: Optional[datetime]


class HabitLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    habit_id: int
    logged_date: date
    bool_value: Optional[bool]
    numeric_value: Optional[float]
    note: Optional[str]


class HabitStreakResponse(HabitResponse):
    current_streak: Optional[int]
    completed_today: bool
    last_logged_date: Optional[date]
