"""
Unit tests for week.py

Weeks run Sunday to Saturday and are keyed by their Sunday at midnight.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from bargain_bites.week import (
    format_week_range,
    is_current_week,
    is_future_week,
    is_past_week,
    shift_week,
    week_end,
    week_key_str,
    week_start,
)


class TestWeekStart:

    @pytest.mark.parametrize("value", [
        "2024-03-10",  # Sunday
        "2024-03-11",
        "2024-03-14",  # Thursday
        "2024-03-16",  # Saturday
        date(2024, 3, 14),
        datetime(2024, 3, 16, 23, 59, 59, 999999),
        "2024-03-14T18:30:00",
    ])
    def test_days_of_one_week_share_a_key(self, value):
        assert week_start(value) == datetime(2024, 3, 10)

    def test_sunday_starts_the_next_week(self):
        assert week_start("2024-03-17") == datetime(2024, 3, 17)

    def test_time_is_zeroed(self):
        result = week_start(datetime(2024, 3, 12, 15, 45, 12, 500))

        assert (result.hour, result.minute, result.second, result.microsecond) == (0, 0, 0, 0)

    def test_crosses_month_and_year(self):
        assert week_start("2025-01-01") == datetime(2024, 12, 29)

    def test_is_idempotent(self):
        key = week_start("2024-03-14")

        assert week_start(key) == key

    def test_result_is_always_sunday(self):
        start = date(2024, 1, 1)
        for offset in range(60):
            assert week_start(start + timedelta(days=offset)).weekday() == 6

    def test_none_means_today(self):
        today = week_start(date.today())

        assert week_start() == today

    def test_aware_datetime_is_made_local(self):
        result = week_start(datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc))

        assert result.tzinfo is None
        assert result == datetime(2024, 3, 10)

    @pytest.mark.parametrize("value", ["next tuesday", "", "2024-13-01", 42])
    def test_invalid_values_raise(self, value):
        with pytest.raises(ValueError, match="Invalid week value"):
            week_start(value)


class TestWeekHelpers:

    def test_week_end_is_saturday(self):
        assert week_end("2024-03-14") == datetime(2024, 3, 16)

    def test_shift_week(self):
        assert shift_week("2024-03-14", 1) == datetime(2024, 3, 17)
        assert shift_week("2024-03-14", -2) == datetime(2024, 2, 25)
        assert shift_week("2024-03-14", 0) == datetime(2024, 3, 10)

    def test_week_key_str(self):
        assert week_key_str("2024-03-14") == "2024-03-10"
        assert week_key_str(date(2024, 3, 17)) == "2024-03-17"

    def test_format_week_range(self):
        assert format_week_range("2024-03-14") == "March 10 - March 16, 2024"

    def test_format_week_range_across_months(self):
        assert format_week_range("2024-03-31") == "March 31 - April 6, 2024"

    def test_format_week_range_uses_sunday_year(self):
        assert format_week_range("2024-12-31") == "December 29 - January 4, 2024"


class TestWeekComparisons:
    """Relative position of a week to the week containing ``today``."""

    TODAY = date(2024, 3, 14)

    def test_current_week(self):
        assert is_current_week("2024-03-10", today=self.TODAY)
        assert is_current_week("2024-03-16", today=self.TODAY)
        assert not is_past_week("2024-03-10", today=self.TODAY)
        assert not is_future_week("2024-03-10", today=self.TODAY)

    def test_past_week(self):
        assert is_past_week("2024-03-09", today=self.TODAY)
        assert not is_current_week("2024-03-09", today=self.TODAY)

    def test_future_week(self):
        assert is_future_week("2024-03-17", today=self.TODAY)
        assert not is_current_week("2024-03-17", today=self.TODAY)
