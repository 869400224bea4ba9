"""Unit tests for calendar stepping"""

import pytest
from datetime import date
from payment_calendar.utils.date_utils import (
    date_at_offset,
    default_horizon,
    generate_date_range,
    month_bounds,
)


def test_fixed_day_steps():
    start = date(2024, 1, 1)
    assert date_at_offset(start, 3, "daily") == date(2024, 1, 4)
    assert date_at_offset(start, 3, "weekly") == date(2024, 1, 22)
    assert date_at_offset(start, 3, "biweekly") == date(2024, 2, 12)


def test_monthly_clamps_and_recovers_day_of_month():
    """Day 31 clamps to shorter month ends but returns to 31 when the month allows"""
    start = date(2024, 1, 31)
    dates = [date_at_offset(start, n, "monthly") for n in range(5)]

    assert dates == [
        date(2024, 1, 31),
        date(2024, 2, 29),  # leap year
        date(2024, 3, 31),
        date(2024, 4, 30),
        date(2024, 5, 31),
    ]


def test_monthly_non_leap_february():
    assert date_at_offset(date(2023, 1, 30), 1, "monthly") == date(2023, 2, 28)
    assert date_at_offset(date(2023, 1, 30), 2, "monthly") == date(2023, 3, 30)


def test_yearly_leap_day_clamps():
    start = date(2024, 2, 29)
    assert date_at_offset(start, 1, "yearly") == date(2025, 2, 28)
    assert date_at_offset(start, 4, "yearly") == date(2028, 2, 29)


def test_once_always_returns_start():
    start = date(2024, 6, 1)
    assert date_at_offset(start, 0, "once") == start
    assert date_at_offset(start, 5, "once") == start


def test_unknown_frequency_rejected():
    with pytest.raises(ValueError):
        date_at_offset(date(2024, 1, 1), 1, "fortnightly")


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


def test_default_horizon_is_end_of_next_year():
    assert default_horizon(date(2024, 3, 15)) == date(2025, 12, 31)
    assert default_horizon(date(2024, 3, 15), years_ahead=0) == date(2024, 12, 31)


def test_generate_date_range_inclusive():
    days = generate_date_range(date(2024, 2, 27), date(2024, 3, 1))
    assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
