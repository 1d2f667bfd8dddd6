"""Habits models with prefixed tables."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.orm import Mapped, mapped_column, relationship

from streakline.core.users.models import User  # noqa: F401  (owner FK target)
from streakline.extensions import db


class Habit(db.Model):
    __tablename__ = "habits_habit"
    __table_args__ = (
        db.Index("ix_habits_habit_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    habit_type: Mapped[str] = mapped_column(db.String(32), nullable=False)
    goal: Mapped[Decimal | None] = mapped_column(db.Numeric(12, 2))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    logs: Mapped[list["HabitLog"]] = relationship(
        "HabitLog",
        back_populates="habit",
        cascade="all, delete-orphan",
    )


class HabitLog(db.Model):
    __tablename__ = "habits_habit_log"
    __table_args__ = (
        db.UniqueConstraint("habit_id", "logged_date", name="uq_habits_log_habit_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    habit_id: Mapped[int] = mapped_column(
        db.ForeignKey("habits_habit.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    logged_date: Mapped[date] = mapped_column(nullable=False)
    bool_value: Mapped[bool | None] = mapped_column(db.Boolean)
    numeric_value: Mapped[Decimal | None] = mapped_column(db.Numeric(12, 2))
    note: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    habit: Mapped[Habit] = relationship("Habit", back_populates="logs")
