"""Tests for proration date arithmetic (avos and notice days)."""

from datetime import date

import pytest

from rescisao.sdk.dates import (
    days_between,
    default_notice_days,
    default_thirteenth_fraction,
    default_vacation_fraction,
    derive_defaults,
    months_between,
)


class TestMonthsBetween:
    """Elapsed months with the day-15 rounding rule."""

    def test_day_difference_below_15_not_counted(self):
        assert months_between(date(2023, 1, 10), date(2024, 7, 20)) == 18

    def test_day_difference_of_15_counts_extra_month(self):
        assert months_between(date(2024, 1, 1), date(2024, 3, 16)) == 3

    def test_negative_day_difference(self):
        # 2 months minus some days -> still 1 month when the day goes back
        assert months_between(date(2024, 1, 20), date(2024, 3, 5)) == 2

    def test_same_day_is_zero(self):
        assert months_between(date(2024, 5, 5), date(2024, 5, 5)) == 0

    def test_floored_at_zero(self):
        assert months_between(date(2024, 5, 5), date(2024, 4, 30)) == 0


class TestDaysBetween:

    def test_inclusive_same_day(self):
        assert days_between(date(2024, 3, 1), date(2024, 3, 1)) == 1

    def test_inclusive_range(self):
        assert days_between(date(2023, 1, 10), date(2024, 7, 20)) == 558


class TestNoticeDays:

    @pytest.mark.parametrize("days_of_service,expected", [
        (1, 30),
        (364, 30),
        (365, 30),       # first full year adds nothing
        (730, 33),       # second year adds 3
        (365 * 5, 42),
        (365 * 21, 90),
        (365 * 40, 90),  # capped
    ])
    def test_default_notice_days(self, days_of_service, expected):
        assert default_notice_days(days_of_service) == expected


class TestFractions:

    def test_vacation_fraction_is_months_modulo_12(self):
        assert default_vacation_fraction(date(2023, 1, 10), date(2024, 7, 20)) == 6

    def test_vacation_fraction_full_period_is_zero(self):
        assert default_vacation_fraction(date(2023, 3, 1), date(2024, 3, 1)) == 0

    def test_thirteenth_fraction_is_month_plus_one(self):
        """Counted from the calendar month, not from months of service."""
        assert default_thirteenth_fraction(date(2024, 7, 20)) == 8
        assert default_thirteenth_fraction(date(2024, 1, 31)) == 2

    def test_thirteenth_fraction_december_capped(self):
        assert default_thirteenth_fraction(date(2024, 12, 10)) == 12

    def test_thirteenth_fraction_ignores_hire_date(self):
        defaults = derive_defaults(date(2024, 6, 1), date(2024, 7, 20))
        assert defaults["thirteenth_fraction"] == 8
        assert defaults["vacation_fraction"] == 2


def test_derive_defaults():
    defaults = derive_defaults(date(2023, 1, 10), date(2024, 7, 20))

    assert defaults == {
        "months_of_service": 18,
        "days_of_service": 558,
        "vacation_fraction": 6,
        "thirteenth_fraction": 8,
        "notice_days": 30,
    }
