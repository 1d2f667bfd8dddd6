"""Tests for the daily log recorder."""

from datetime import date, datetime
from decimal import Decimal

import pytest

pytestmark = pytest.mark.integration

from streakline.core.errors import Forbidden, NotFound, ValidationError
from streakline.domains.habits.models import HabitLog
from streakline.domains.habits.services import create_habit, list_logs, log_service, record_log

DAY = date(2026, 3, 10)


@pytest.fixture
def yes_no(app, user):
    return create_habit(user.id, name="Meditate", habit_type="yes_no")


@pytest.fixture
def measurable(app, user):
    return create_habit(user.id, name="Pages", habit_type="measurable", goal=20)


@pytest.fixture
def quit_habit(app, user):
    return create_habit(user.id, name="No soda", habit_type="quit")


class TestRecordLog:
    def test_first_record_creates(self, app, user, yes_no):
        log, created = record_log(user.id, yes_no.id, logged_date=DAY, bool_value=True, note=" calm ")
        assert created is True
        assert log.bool_value is True
        assert log.numeric_value is None
        assert log.note == "calm"

    def test_second_record_same_day_updates_in_place(self, app, user, yes_no):
        first, _ = record_log(user.id, yes_no.id, logged_date=DAY, bool_value=True)
        second, created = record_log(user.id, yes_no.id, logged_date=DAY, bool_value=False, note="missed")

        assert created is False
        assert second.id == first.id
        rows = HabitLog.query.filter_by(habit_id=yes_no.id, logged_date=DAY).all()
        assert len(rows) == 1
        assert rows[0].bool_value is False
        assert rows[0].note == "missed"

    def test_measurable_stores_numeric_only(self, app, user, measurable):
        log, _ = record_log(user.id, measurable.id, logged_date=DAY, numeric_value=25, bool_value=True)
        assert log.numeric_value == Decimal("25")
        assert log.bool_value is None

    def test_boolean_types_ignore_numeric(self, app, user, quit_habit):
        log, _ = record_log(user.id, quit_habit.id, logged_date=DAY, bool_value=True, numeric_value=3)
        assert log.bool_value is True
        assert log.numeric_value is None

    @pytest.mark.parametrize("kwargs", [{}, {"numeric_value": 1}, {"bool_value": "yes"}, {"bool_value": 1}])
    def test_yes_no_requires_bool(self, app, user, yes_no, kwargs):
        with pytest.raises(ValidationError):
            record_log(user.id, yes_no.id, logged_date=DAY, **kwargs)
        assert HabitLog.query.filter_by(habit_id=yes_no.id).count() == 0

    @pytest.mark.parametrize(
        "kwargs",
        [{}, {"bool_value": True}, {"numeric_value": "12"}, {"numeric_value": float("nan")}, {"numeric_value": 1e12}],
    )
    def test_measurable_requires_number(self, app, user, measurable, kwargs):
        with pytest.raises(ValidationError):
            record_log(user.id, measurable.id, logged_date=DAY, **kwargs)

    def test_quit_requires_bool(self, app, user, quit_habit):
        with pytest.raises(ValidationError):
            record_log(user.id, quit_habit.id, logged_date=DAY)

    def test_logged_date_must_be_a_date(self, app, user, yes_no):
        with pytest.raises(ValidationError):
            record_log(user.id, yes_no.id, logged_date="2026-03-10", bool_value=True)
        with pytest.raises(ValidationError):
            record_log(user.id, yes_no.id, logged_date=datetime(2026, 3, 10, 8), bool_value=True)

    def test_unknown_habit(self, app, user):
        with pytest.raises(NotFound):
            record_log(user.id, 999999, logged_date=DAY, bool_value=True)

    def test_non_owner_forbidden_and_nothing_written(self, app, user, other_user, yes_no):
        with pytest.raises(Forbidden):
            record_log(other_user.id, yes_no.id, logged_date=DAY, bool_value=True)
        assert HabitLog.query.filter_by(habit_id=yes_no.id).count() == 0

    def test_native_upsert_skips_lookup(self, app, user, yes_no, monkeypatch):
        """SQLite and PostgreSQL resolve the (habit, day) conflict in one statement."""
        assert log_service._native_insert() is not None

        def no_lookup(habit_id, logged_date):
            raise AssertionError("upsert should not look the row up first")

        monkeypatch.setattr(log_service, "_find_log", no_lookup)
        first, created_first = record_log(user.id, yes_no.id, logged_date=DAY, bool_value=False)
        second, created_second = record_log(user.id, yes_no.id, logged_date=DAY, bool_value=True, note="later")

        assert (created_first, created_second) == (True, False)
        assert second.id == first.id
        assert second.bool_value is True
        assert second.note == "later"
        assert HabitLog.query.filter_by(habit_id=yes_no.id).count() == 1

    def test_concurrent_insert_falls_back_to_update(self, app, user, yes_no, monkeypatch):
        """Without a native upsert, a row that appears between the lookup and the insert is overwritten."""
        monkeypatch.setattr(log_service, "_native_insert", lambda: None)
        existing, created = record_log(user.id, yes_no.id, logged_date=DAY, bool_value=False)
        assert created is True

        real_find = log_service._find_log
        calls = []

        def stale_then_real(habit_id, logged_date):
            calls.append(logged_date)
            if len(calls) == 1:
                return None
            return real_find(habit_id, logged_date)

        monkeypatch.setattr(log_service, "_find_log", stale_then_real)
        log, created = record_log(user.id, yes_no.id, logged_date=DAY, bool_value=True, note="won")

        assert created is False
        assert log.id == existing.id
        assert len(calls) == 2
        rows = HabitLog.query.filter_by(habit_id=yes_no.id).all()
        assert len(rows) == 1
        assert rows[0].bool_value is True
        assert rows[0].note == "won"


class TestListLogs:
    def test_newest_first_with_bounds(self, app, user, yes_no):
        for day in (date(2026, 3, 1), date(2026, 3, 5), date(2026, 3, 9)):
            record_log(user.id, yes_no.id, logged_date=day, bool_value=True)

        all_logs = list_logs(user.id, yes_no.id)
        assert [log.logged_date for log in all_logs] == [date(2026, 3, 9), date(2026, 3, 5), date(2026, 3, 1)]

        bounded = list_logs(user.id, yes_no.id, start=date(2026, 3, 2), end=date(2026, 3, 9))
        assert [log.logged_date for log in bounded] == [date(2026, 3, 9), date(2026, 3, 5)]

    def test_start_after_end(self, app, user, yes_no):
        with pytest.raises(ValidationError):
            list_logs(user.id, yes_no.id, start=date(2026, 3, 9), end=date(2026, 3, 1))

    def test_non_owner(self, app, user, other_user, yes_no):
        with pytest.raises(Forbidden):
            list_logs(other_user.id, yes_no.id)
