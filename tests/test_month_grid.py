import pytest

from backend.month_grid import (
    DAYS_PER_WEEK,
    MonthGridCache,
    build_month_grid,
    days_in_month,
    leading_blanks,
    month_key,
    shift_month,
)


@pytest.mark.parametrize("year", [1999, 2023, 2024, 2100])
@pytest.mark.parametrize("month", range(1, 13))
@pytest.mark.parametrize("first_day_of_week", range(7))
def test_rows_have_seven_cells_and_all_days(year, month, first_day_of_week):
    grid = build_month_grid(year, month, first_day_of_week)

    assert all(len(row.cells) == DAYS_PER_WEEK for row in grid.rows)
    in_month = [cell.day for cell in grid.cells() if cell.in_month]
    assert in_month == list(range(1, days_in_month(year, month) + 1))


def test_february_2024_sunday_first():
    grid = build_month_grid(2024, 2, 0)

    assert grid.key == "2024-02"
    assert len(grid.rows) == 5
    first_row = grid.rows[0].cells
    assert [cell.day for cell in first_row] == [None, None, None, None, 1, 2, 3]
    last_row = grid.rows[-1].cells
    assert [cell.day for cell in last_row] == [25, 26, 27, 28, 29, None, None]


def test_february_2024_monday_first():
    assert leading_blanks(2024, 2, 1) == 3
    grid = build_month_grid(2024, 2, 1)
    assert grid.cell(5).row == 1
    assert grid.cell(5).column == 0


def test_days_in_month():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 12) == 31
    assert days_in_month(2024, 4) == 30


def test_blank_cells_have_no_day():
    grid = build_month_grid(2024, 2, 0)
    blanks = [cell for cell in grid.cells() if not cell.in_month]

    assert len(blanks) == 35 - 29
    assert all(cell.cell_date is None for cell in blanks)
    assert grid.cell(30) is None


def test_shift_month_wraps_years():
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2023, 12, 1) == (2024, 1)
    assert shift_month(2024, 5, 14) == (2025, 7)


def test_month_key_is_zero_padded():
    assert month_key(2024, 3) == "2024-03"


def test_invalid_first_day_of_week():
    with pytest.raises(ValueError):
        build_month_grid(2024, 2, 7)


def test_cache_builds_each_month_once():
    cache = MonthGridCache(first_day_of_week=0, base_row_height=20)

    grid = cache.get_or_build(2024, 2)
    again = cache.get_or_build(2024, 2)

    assert grid is again
    assert len(cache) == 1
    assert "2024-02" in cache
    assert all(row.height == 20 for row in grid.rows)
