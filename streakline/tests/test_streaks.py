"""Pure streak calculator tests: no database, ``today`` always pinned."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from streakline.domains.habits.services.streak_service import (
    abstinence_streak,
    completed_dates,
    completed_on,
    completion_streak,
    current_streak,
)

pytestmark = pytest.mark.unit

TODAY = date(2026, 3, 15)


def _habit(habit_type: str, *, goal=None, created_at=datetime(2026, 3, 5, 21, 30)):
    return SimpleNamespace(habit_type=habit_type, goal=goal, created_at=created_at)


def _log(days_ago: int, *, bool_value=None, numeric_value=None):
    return SimpleNamespace(
        logged_date=TODAY - timedelta(days=days_ago),
        bool_value=bool_value,
        numeric_value=numeric_value,
    )


class TestCompletionStreak:
    """Backward walk from today, or from yesterday when today is still open."""

    def test_today_and_two_prior_days(self):
        done = {TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)}
        assert completion_streak(done, TODAY) == 3

    def test_today_missing_counts_from_yesterday(self):
        done = {TODAY - timedelta(days=1), TODAY - timedelta(days=2)}
        assert completion_streak(done, TODAY) == 2

    def test_gap_before_yesterday_breaks(self):
        """Last completion two days ago: the chain is already broken."""
        done = {TODAY - timedelta(days=2), TODAY - timedelta(days=3)}
        assert completion_streak(done, TODAY) == 0

    def test_stops_at_first_gap(self):
        done = {TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=3)}
        assert completion_streak(done, TODAY) == 2

    def test_future_dates_ignored(self):
        done = {TODAY + timedelta(days=1), TODAY}
        assert completion_streak(done, TODAY) == 1

    def test_empty(self):
        assert completion_streak(set(), TODAY) == 0


class TestAbstinenceStreak:
    def test_no_relapse_counts_from_creation_day(self):
        # The time part of created_at is ignored.
        assert abstinence_streak(datetime(2026, 3, 5, 23, 59), [], TODAY) == 10

    def test_latest_relapse_is_anchor(self):
        relapses = [date(2026, 3, 12), date(2026, 3, 8)]
        assert abstinence_streak(datetime(2026, 3, 1), relapses, TODAY) == 3

    def test_relapse_today_is_zero(self):
        assert abstinence_streak(datetime(2026, 3, 1), [TODAY], TODAY) == 0

    def test_future_relapse_ignored(self):
        relapses = [TODAY + timedelta(days=2), date(2026, 3, 10)]
        assert abstinence_streak(datetime(2026, 3, 1), relapses, TODAY) == 5

    def test_created_after_today_clamps_to_zero(self):
        assert abstinence_streak(datetime(2026, 3, 20), [], TODAY) == 0

    def test_order_of_relapses_does_not_matter(self):
        relapses = [date(2026, 3, 8), date(2026, 3, 12), date(2026, 3, 2)]
        assert abstinence_streak(datetime(2026, 3, 1), relapses, TODAY) == 3


class TestCurrentStreak:
    def test_yes_no_false_log_does_not_extend(self):
        habit = _habit("yes_no")
        logs = [_log(0, bool_value=False), _log(1, bool_value=True), _log(2, bool_value=True)]
        assert current_streak(habit, logs, TODAY) == 2

    def test_yes_no_false_log_breaks_chain(self):
        habit = _habit("yes_no")
        logs = [_log(0, bool_value=True), _log(1, bool_value=False), _log(2, bool_value=True)]
        assert current_streak(habit, logs, TODAY) == 1

    def test_quit_without_logs_uses_created_at(self):
        assert current_streak(_habit("quit"), [], TODAY) == 10

    def test_quit_any_row_is_relapse(self):
        habit = _habit("quit")
        logs = [_log(4, bool_value=False)]
        assert current_streak(habit, logs, TODAY) == 4

    def test_measurable_goal_mode_counts_days_meeting_goal(self):
        habit = _habit("measurable", goal=Decimal("20.00"))
        logs = [
            _log(0, numeric_value=Decimal("25.00")),
            _log(1, numeric_value=Decimal("20.00")),
            _log(2, numeric_value=Decimal("19.99")),
            _log(3, numeric_value=Decimal("40.00")),
        ]
        assert current_streak(habit, logs, TODAY) == 2

    def test_measurable_partial_progress_does_not_count(self):
        habit = _habit("measurable", goal=Decimal("10"))
        logs = [_log(0, numeric_value=Decimal("9.5"))]
        assert current_streak(habit, logs, TODAY) == 0

    def test_measurable_legacy_mode_always_zero(self):
        habit = _habit("measurable", goal=Decimal("1"))
        logs = [_log(0, numeric_value=Decimal("5")), _log(1, numeric_value=Decimal("5"))]
        assert current_streak(habit, logs, TODAY, measurable_mode="legacy") == 0

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            completed_dates(_habit("yes_no"), [], measurable_mode="bogus")

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            current_streak(_habit("daily"), [], TODAY)

    def test_malformed_date_raises_type_error(self):
        habit = _habit("yes_no")
        bad = SimpleNamespace(logged_date="2026-03-15", bool_value=True, numeric_value=None)
        with pytest.raises(TypeError):
            current_streak(habit, [bad], TODAY)


class TestCompletedOn:
    def test_yes_no_false_log_is_not_done(self):
        assert completed_on(_habit("yes_no"), [_log(0, bool_value=False)], TODAY) is False
        assert completed_on(_habit("yes_no"), [_log(0, bool_value=True)], TODAY) is True

    def test_measurable_below_goal_is_not_done(self):
        habit = _habit("measurable", goal=Decimal("20"))
        assert completed_on(habit, [_log(0, numeric_value=Decimal("19"))], TODAY) is False
        assert completed_on(habit, [_log(0, numeric_value=Decimal("20"))], TODAY) is True

    def test_quit_relapse_today_is_not_done(self):
        habit = _habit("quit")
        assert completed_on(habit, [_log(0, bool_value=True)], TODAY) is False
        assert completed_on(habit, [_log(1, bool_value=True)], TODAY) is True
        assert completed_on(habit, [], TODAY) is True

    def test_only_the_given_day_matters(self):
        assert completed_on(_habit("yes_no"), [_log(1, bool_value=True)], TODAY) is False
