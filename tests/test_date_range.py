from datetime import date, datetime

import pytest

from backend.date_range import DateRange, expand


def test_multi_day_range_with_partial_finish():
    days = expand(datetime(2024, 2, 10, 9, 0), datetime(2024, 2, 12, 10, 0))

    assert list(days) == [date(2024, 2, 10), date(2024, 2, 11), date(2024, 2, 12)]
    assert days.partial_finish is True
    assert len(days) == 3


def test_range_can_be_iterated_again():
    days = expand(datetime(2024, 2, 27, 8, 0), datetime(2024, 3, 2, 8, 0))

    assert list(days) == list(days)
    assert list(days)[-1] == date(2024, 3, 2)


def test_days_are_ascending_and_unique():
    days = list(expand(datetime(2023, 12, 25, 18, 0), datetime(2024, 1, 9, 7, 30)))

    assert days == sorted(days)
    assert len(days) == len(set(days))
    assert len(days) == 16


def test_finish_at_midnight_is_not_partial():
    days = expand(datetime(2024, 2, 10), datetime(2024, 2, 11))

    assert list(days) == [date(2024, 2, 10), date(2024, 2, 11)]
    assert days.partial_finish is False


def test_start_time_does_not_drop_finish_day():
    # Start later in the day than the finish
    days = expand(datetime(2024, 2, 10, 15, 0), datetime(2024, 2, 11, 10, 0))

    assert list(days) == [date(2024, 2, 10), date(2024, 2, 11)]


def test_finish_before_start_is_rejected():
    with pytest.raises(ValueError):
        expand(datetime(2024, 2, 10, 10, 0), datetime(2024, 2, 10, 9, 0))


def test_months_across_year_boundary():
    days = DateRange(datetime(2023, 12, 30, 12, 0), datetime(2024, 1, 2, 12, 0))

    assert days.months() == [(2023, 12), (2024, 1)]
    assert days.intersects_month(2024, 1)
    assert not days.intersects_month(2024, 2)
    assert date(2023, 12, 31) in days
    assert datetime(2024, 1, 3, 0, 0) not in days
