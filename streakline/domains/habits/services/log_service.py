"""Log recorder: one observation per habit per calendar day."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from streakline.core.errors import ValidationError
from streakline.domains.habits.models.habit_models import HabitLog
from streakline.domains.habits.observations import observation_for
from streakline.domains.habits.services.catalog_service import get_owned_habit
from streakline.extensions import db

logger = logging.getLogger(__name__)


def _require_date(value: object, field: str = "logged_date") -> date:
    # datetime is a date subclass; a timestamp is not a calendar day.
    if not isinstance(value, date) or isinstance(value, datetime):
        raise ValidationError(f"{field} must be a calendar date in YYYY-MM-DD format.")
    return value


def _find_log(habit_id: int, logged_date: date) -> Optional[HabitLog]:
    return HabitLog.query.filter_by(habit_id=habit_id, logged_date=logged_date).first()


_NATIVE_INSERTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


def _native_insert():
    """The dialect's ``INSERT .. ON CONFLICT`` construct, or None."""
    return _NATIVE_INSERTS.get(db.session.get_bind().dialect.name)


def _native_upsert(insert, habit_id: int, day: date, values: dict) -> Tuple[HabitLog, bool]:
    now = datetime.utcnow()
    table = HabitLog.__table__
    stmt = insert(table).values(
        habit_id=habit_id, logged_date=day, created_at=now, updated_at=now, **values
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.habit_id, table.c.logged_date],
        set_={**values, "updated_at": now},
    ).returning(table.c.id, table.c.created_at)
    row = db.session.execute(stmt).one()
    # created_at is only written by the insert branch.
    created = row.created_at == now
    log = db.session.get(HabitLog, row.id, populate_existing=True)
    return log, created


def _savepoint_upsert(habit_id: int, day: date, values: dict) -> Tuple[HabitLog, bool]:
    log = _find_log(habit_id, day)
    if log is not None:
        for key, value in values.items():
            setattr(log, key, value)
        return log, False
    try:
        with db.session.begin_nested():
            log = HabitLog(habit_id=habit_id, logged_date=day, **values)
            db.session.add(log)
    except IntegrityError:
        existing = _find_log(habit_id, day)
        if existing is None:
            raise
        logger.debug("Concurrent insert for habit %s on %s; updating instead", habit_id, day)
        for key, value in values.items():
            setattr(existing, key, value)
        return existing, False
    return log, True


def record_log(
    caller_id: int,
    habit_id: int,
    *,
    logged_date: date,
    bool_value: bool | None = None,
    numeric_value: float | None = None,
    note: str | None = None,
) -> Tuple[HabitLog, bool]:
    """Upsert the caller's observation for ``habit_id`` on ``logged_date``.

    Returns ``(log, created)``. Recording again for a day that already has a row
    overwrites that row in place, so the last writer wins. On SQLite and
    PostgreSQL this is a single ``INSERT .. ON CONFLICT DO UPDATE`` keyed on
    (habit, day). Other databases insert inside a savepoint and turn a unique
    constraint violation into an update.
    """
    habit = get_owned_habit(habit_id, caller_id)
    day = _require_date(logged_date)
    observation = observation_for(habit.habit_type, bool_value, numeric_value)
    bool_col, numeric_col = observation.columns()
    values = {
        "bool_value": bool_col,
        "numeric_value": numeric_col,
        "note": (note or "").strip() or None,
    }

    insert = _native_insert()
    if insert is not None:
        log, created = _native_upsert(insert, habit_id, day, values)
    else:
        log, created = _savepoint_upsert(habit_id, day, values)

    db.session.commit()
    logger.info(
        "User %s %s log %s for habit %s on %s",
        caller_id,
        "created" if created else "updated",
        log.id,
        habit_id,
        day.isoformat(),
    )
    return log, created


def list_logs(
    caller_id: int,
    habit_id: int,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[HabitLog]:
    """Logs for one owned habit, newest first, optionally bounded (inclusive)."""
    get_owned_habit(habit_id, caller_id)
    if start is not None and end is not None and start > end:
        raise ValidationError("start must be on or before end.")
    query = HabitLog.query.filter_by(habit_id=habit_id)
    if start is not None:
        query = query.filter(HabitLog.logged_date >= _require_date(start, "start"))
    if end is not None:
        query = query.filter(HabitLog.logged_date <= _require_date(end, "end"))
    return query.order_by(HabitLog.logged_date.desc()).all()


__all__ = ["record_log", "list_logs"]
