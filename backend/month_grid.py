"""
Month grid generation for Kalgrid.

A month grid is a list of week rows of exactly seven day cells. Cells before
day 1 and after the last day are blanks ("out of month"): they carry no day
number and never host events. Each built grid is cached per MonthKey and is
never rebuilt for the lifetime of the owning calendar.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, Optional

from dateutil.relativedelta import relativedelta

from .debug import debug_print


DAYS_PER_WEEK = 7


def _debug_print(message: str) -> None:
    debug_print("GRID", message)


def month_key(year: int, month: int) -> str:
    """MonthKey of a month, e.g. month_key(2024, 2) == "2024-02"."""
    return f"{year:04d}-{month:02d}"


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move `delta` months forward (or back) and return (year, month)."""
    shifted = date(year, month, 1) + relativedelta(months=delta)
    return shifted.year, shifted.month


def days_in_month(year: int, month: int) -> int:
    # day=31 clamps to the last day of the month
    return (date(year, month, 1) + relativedelta(day=31)).day


def sunday_first_weekday(d: date) -> int:
    """Weekday with 0 = Sunday ... 6 = Saturday."""
    return d.isoweekday() % 7


def leading_blanks(year: int, month: int, first_day_of_week: int) -> int:
    """Number of out-of-month cells before day 1."""
    return (sunday_first_weekday(date(year, month, 1)) - first_day_of_week + 7) % 7


@dataclass
class DayCell:
    """One slot of the grid; `day` is None for out-of-month blanks."""
    key: str
    day: Optional[int]
    row: int
    column: int
    cell_date: Optional[date] = None
    events: list = field(default_factory=list)  # PlacedEvent, in placement order

    @property
    def in_month(self) -> bool:
        return self.day is not None

    @property
    def stack_height(self) -> int:
        """Bottom edge of the lowest event hosted by this cell, 0 if empty."""
        return max((placed.bottom for placed in self.events), default=0)


@dataclass
class WeekRow:
    index: int
    cells: list[DayCell]
    height: int = 0

    def in_month_cells(self) -> list[DayCell]:
        return [cell for cell in self.cells if cell.in_month]

    def cell_for(self, d: date) -> Optional[DayCell]:
        for cell in self.cells:
            if cell.cell_date == d:
                return cell
        return None

    def last_in_month_cell(self) -> DayCell:
        return self.in_month_cells()[-1]

    def placed_events(self) -> Iterator:
        for cell in self.cells:
            yield from cell.events

    def recompute_height(self, minimum: int = 0) -> int:
        """Grow (or shrink) the row to fit its lowest event."""
        self.height = max([minimum] + [placed.bottom for placed in self.placed_events()])
        return self.height


@dataclass
class MonthGrid:
    year: int
    month: int
    first_day_of_week: int
    rows: list[WeekRow]
    base_row_height: int = 0

    @property
    def key(self) -> str:
        return month_key(self.year, self.month)

    @property
    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month)

    def cells(self) -> Iterator[DayCell]:
        for row in self.rows:
            yield from row.cells

    def cell(self, day: int) -> Optional[DayCell]:
        """In-month cell for a day number, or None."""
        for cell in self.cells():
            if cell.day == day:
                return cell
        return None

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def placed_events(self) -> Iterator:
        for row in self.rows:
            yield from row.placed_events()

    def event_ids(self) -> set[str]:
        return {placed.event_id for placed in self.placed_events()}

    def has_event(self, event_id: str) -> bool:
        return any(placed.event_id == event_id for placed in self.placed_events())

    def remove_event(self, event_id: str) -> int:
        """Strip every placement of an event; returns how many were removed."""
        removed = 0
        for row in self.rows:
            touched = False
            for cell in row.cells:
                kept = [placed for placed in cell.events if placed.event_id != event_id]
                if len(kept) != len(cell.events):
                    removed += len(cell.events) - len(kept)
                    cell.events = kept
                    touched = True
            if touched:
                row.recompute_height(self.base_row_height)
        return removed

    def __repr__(self):
        return f"MonthGrid({self.key}, rows={len(self.rows)})"


def build_month_grid(
    year: int,
    month: int,
    first_day_of_week: int = 0,
    base_row_height: int = 0
) -> MonthGrid:
    """
    Lay out a month as week rows of seven cells.

    Args:
        year: Full year, e.g. 2024
        month: 1 = January ... 12 = December
        first_day_of_week: Leftmost column, 0 = Sunday ... 6 = Saturday
        base_row_height: Height of a row without events (the day label)
    """
    if not 0 <= first_day_of_week < DAYS_PER_WEEK:
        raise ValueError(f"first_day_of_week must be 0-6, got {first_day_of_week}")

    key = month_key(year, month)
    slots: list[Optional[int]] = [None] * leading_blanks(year, month, first_day_of_week)
    slots.extend(range(1, days_in_month(year, month) + 1))
    while len(slots) % DAYS_PER_WEEK:
        slots.append(None)

    rows = []
    for row_index in range(len(slots) // DAYS_PER_WEEK):
        cells = []
        for column in range(DAYS_PER_WEEK):
            day = slots[row_index * DAYS_PER_WEEK + column]
            cells.append(DayCell(
                key=key,
                day=day,
                row=row_index,
                column=column,
                cell_date=date(year, month, day) if day is not None else None,
            ))
        rows.append(WeekRow(index=row_index, cells=cells, height=base_row_height))

    return MonthGrid(
        year=year,
        month=month,
        first_day_of_week=first_day_of_week,
        rows=rows,
        base_row_height=base_row_height,
    )


class MonthGridCache:
    """
    Grids built so far, one per MonthKey.

    Owned by a single calendar controller. A grid is built on first
    reference and reused afterwards.
    """

    def __init__(
        self,
        first_day_of_week: int = 0,
        base_row_height: int = 0
    ):
        self.first_day_of_week = first_day_of_week
        self.base_row_height = base_row_height
        self._grids: dict[str, MonthGrid] = {}

    def get(self, key: str) -> Optional[MonthGrid]:
        return self._grids.get(key)

    def get_or_build(self, year: int, month: int) -> MonthGrid:
        key = month_key(year, month)
        grid = self._grids.get(key)
        if grid is None:
            grid = build_month_grid(year, month, self.first_day_of_week, self.base_row_height)
            self._grids[key] = grid
            _debug_print(f"Built {key}: {len(grid.rows)} rows")
        return grid

    def __contains__(self, key: str) -> bool:
        return key in self._grids

    def __iter__(self) -> Iterator[MonthGrid]:
        return iter(list(self._grids.values()))

    def __len__(self) -> int:
        return len(self._grids)

    def keys(self) -> list[str]:
        return list(self._grids.keys())
