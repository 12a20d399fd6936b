"""
Calendar-day expansion of event time ranges.
"""

from datetime import datetime, date, timedelta, time as dt_time
from typing import Iterator


class DateRange:
    """
    The calendar days touched by a (start, finish) pair.

    Iterating yields `date` objects in ascending order, one per day, from the
    start's day through the finish's day. The object can be iterated any
    number of times; days are produced lazily.

    `partial_finish` marks a finish that stops inside its day (non-zero time
    of day), so the last day is a true endpoint rather than a full day.
    """

    def __init__(self, start: datetime, finish: datetime):
        if finish < start:
            raise ValueError(f"finish {finish} is before start {start}")
        self.start = start
        self.finish = finish

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        return self.finish.date()

    @property
    def partial_finish(self) -> bool:
        return self.finish.time() != dt_time.min

    def __iter__(self) -> Iterator[date]:
        current = self.first_day
        last = self.last_day
        while current <= last:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        return (self.last_day - self.first_day).days + 1

    def __contains__(self, day) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        return self.first_day <= day <= self.last_day

    def months(self) -> list[tuple[int, int]]:
        """Return the (year, month) pairs touched by the range, in order."""
        result = []
        year, month = self.first_day.year, self.first_day.month
        last = (self.last_day.year, self.last_day.month)
        while (year, month) <= last:
            result.append((year, month))
            if month == 12:
                year, month = year + 1, 1
            else:
                month += 1
        return result

    def intersects_month(self, year: int, month: int) -> bool:
        first = (self.first_day.year, self.first_day.month)
        last = (self.last_day.year, self.last_day.month)
        return first <= (year, month) <= last

    def __repr__(self):
        return f"DateRange({self.start.isoformat()} -> {self.finish.isoformat()})"


def expand(start: datetime, finish: datetime) -> DateRange:
    """Expand a (start, finish) pair into the calendar days it touches."""
    return DateRange(start, finish)
