"""Flask CLI commands for Streakline.

Usage:
    flask seed-demo                        # demo user, three habits, 14 days of logs
    flask seed-demo --email me@example.com --days 30
    flask streaks --user 1                 # current streak per habit
    flask streaks --user 1 --today 2026-03-01
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import click
from flask.cli import with_appcontext

from streakline.core.auth.auth_service import issue_access_token
from streakline.core.users.models import User
from streakline.domains.habits import services as habit_services
from streakline.domains.habits.constants import (
    HABIT_TYPE_MEASURABLE,
    HABIT_TYPE_QUIT,
    HABIT_TYPE_YES_NO,
)
from streakline.extensions import db

DEMO_HABITS = (
    ("Morning walk", HABIT_TYPE_YES_NO, None),
    ("Read pages", HABIT_TYPE_MEASURABLE, 20),
    ("No soda", HABIT_TYPE_QUIT, None),
)


def seed_demo_user(email: str) -> User:
    user = User.query.filter_by(email=email).first()
    if not user:
        user = User(email=email, full_name="Demo User")
        db.session.add(user)
        db.session.commit()
    return user


def seed_demo_habits(user: User, days: int, today: date) -> int:
    """Create the demo habits once and log ``days`` days for them; returns logs written."""
    if habit_services.list_habits(user.id):
        return 0
    start = today - timedelta(days=days)
    written = 0
    for name, habit_type, goal in DEMO_HABITS:
        habit = habit_services.create_habit(
            user.id,
            name=name,
            habit_type=habit_type,
            goal=goal,
            # Backdated so the quit habit has a history to count from.
            created_at=datetime.combine(start, datetime.min.time()),
        )
        for offset in range(days):
            day = start + timedelta(days=offset + 1)
            if habit_type == HABIT_TYPE_YES_NO:
                # Skip every fifth day so the streak has a visible break.
                habit_services.record_log(user.id, habit.id, logged_date=day, bool_value=offset % 5 != 4)
            elif habit_type == HABIT_TYPE_MEASURABLE:
                habit_services.record_log(user.id, habit.id, logged_date=day, numeric_value=10 + (offset % 3) * 8)
            elif offset == days // 2:
                habit_services.record_log(user.id, habit.id, logged_date=day, bool_value=True, note="relapse")
            else:
                continue
            written += 1
    return written


@click.command("seed-demo")
@click.option("--email", default="demo@streakline.test", show_default=True, help="Demo user email")
@click.option("--days", type=click.IntRange(1, 365), default=14, show_default=True, help="Days of history")
@with_appcontext
def seed_demo_command(email: str, days: int):
    """Create a demo user with one habit of each type and some history."""
    user = seed_demo_user(email)
    written = seed_demo_habits(user, days, habit_services.utc_today())
    click.echo(f"User {user.id} <{user.email}>: {written} logs written")
    click.echo(f"Bearer token: {issue_access_token(user)}")


@click.command("streaks")
@click.option("--user", "-u", "user_id", type=int, required=True, help="Owner user ID")
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Evaluation date")
@with_appcontext
def streaks_command(user_id: int, today: datetime | None):
    """Print the current streak of every habit a user owns."""
    rows = habit_services.compute_streaks(user_id, today=today.date() if today else None)
    if not rows:
        click.echo(f"User {user_id} has no habits.")
        return
    for row in rows:
        habit = row["habit"]
        streak = "n/a" if row["current_streak"] is None else row["current_streak"]
        last = row["last_logged_date"].isoformat() if row["last_logged_date"] else "-"
        click.echo(f"{habit.id:>5}  {habit.habit_type:<10}  {streak:>5}  {last:<10}  {habit.name}")


def register_commands(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(seed_demo_command)
    app.cli.add_command(streaks_command)
