from datetime import date, datetime

import pytest

from concrete_lab.core.date_math import add_days, days_between, to_day


def test_to_day_accepts_dates_datetimes_and_iso_strings():
    assert to_day(date(2025, 3, 1)) == date(2025, 3, 1)
    assert to_day(datetime(2025, 3, 1, 17, 45)) == date(2025, 3, 1)
    assert to_day("2025-03-01") == date(2025, 3, 1)
    assert to_day("2025-03-01T00:00:00.000Z") == date(2025, 3, 1)


def test_to_day_unusable_input():
    assert to_day(None) is None
    assert to_day("") is None
    assert to_day("01/03/2025") is None


def test_add_days_crosses_month_and_leap_day():
    assert add_days(date(2024, 2, 1), 28) == date(2024, 2, 29)
    assert add_days("2025-01-31", 28) == date(2025, 2, 28)
    assert add_days(datetime(2025, 3, 1, 23, 59), 7) == date(2025, 3, 8)
    assert add_days(date(2025, 3, 1), 0) == date(2025, 3, 1)


def test_add_days_invalid_date():
    with pytest.raises(ValueError):
        add_days("not a date", 3)


def test_days_between_is_signed():
    today = date(2025, 3, 10)
    assert days_between(today, date(2025, 3, 9)) == -1
    assert days_between(today, today) == 0
    assert days_between(today, date(2025, 3, 11)) == 1
    assert days_between(today, date(2025, 4, 7)) == 28


def test_days_between_partial_day_rounds_up():
    start = datetime(2025, 3, 10, 0, 0)
    assert days_between(start, datetime(2025, 3, 10, 6, 0)) == 1
    assert days_between(start, datetime(2025, 3, 9, 6, 0)) == 0
