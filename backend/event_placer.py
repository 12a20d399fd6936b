"""
Event layout for the month grid.

Projects events onto day cells: multi-day events become one segment per
week row they cross, and every segment gets a vertical offset inside its
row so that segments sharing a column never overlap. Geometry is logical
(columns and pixel offsets relative to the row top); renderers turn it into
widgets.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from .date_range import expand
from .debug import debug_print
from .errors import RenderingPrerequisiteError
from .month_grid import DayCell, MonthGrid, MonthGridCache, WeekRow


def _debug_print(message: str) -> None:
    debug_print("PLACER", message)


class SegmentKind(Enum):
    """How a placed segment relates to the whole event."""
    SINGLE = "single"   # The event touches one day only
    SPAN = "span"       # First segment of a multi-day event
    REPEAT = "repeat"   # Continuation on a later row or month


@dataclass
class PlacedEvent:
    """
    One segment of an event inside one week row.

    The segment is hosted by the cell of `first_day` and stretches over the
    columns `left_cell`..`right_cell`.
    """
    event_id: str
    label: str
    key: str
    row: int
    left_cell: int
    right_cell: int
    first_day: date
    last_day: date
    top_offset: int
    height: int
    vertical_margin: int
    kind: SegmentKind = SegmentKind.SINGLE
    partial_finish: bool = False

    @property
    def bottom(self) -> int:
        return self.top_offset + self.height

    @property
    def span(self) -> int:
        """Number of columns covered."""
        return self.right_cell - self.left_cell + 1

    def overlaps_columns(self, left: int, right: int) -> bool:
        return self.left_cell <= right and left <= self.right_cell

    def overlaps_vertically(self, top: int, height: int) -> bool:
        return top < self.bottom and self.top_offset < top + height


class EventPlacer:
    """
    Computes segments and stacking offsets, writing them into grid cells.

    Args:
        event_offset: Step in pixels used to push a colliding segment down
        event_height: Height in pixels of one event segment
        base_offset: Offset of the first slot below the day label
    """

    def __init__(self, event_offset: int = 5, event_height: int = 20, base_offset: int = 20):
        self.event_offset = event_offset
        self.event_height = event_height
        self.base_offset = base_offset

    @classmethod
    def from_config(cls, config) -> 'EventPlacer':
        layout = config.layout
        return cls(
            event_offset=layout.event_offset,
            event_height=layout.event_height,
            base_offset=layout.day_label_height,
        )

    def place(
        self,
        event,
        grids: MonthGridCache,
        only_key: Optional[str] = None
    ) -> list[PlacedEvent]:
        """
        Place an event on every in-grid day it touches.

        Args:
            event: Object with id, title, start, finish and repeat_title
            grids: Grid cache; missing months are built first
            only_key: When given, only segments of this MonthKey are written

        Returns:
            The segments written, in day order.
        """
        date_range = expand(event.start, event.finish)
        days = list(date_range)
        finish_day = date_range.last_day
        partial = date_range.partial_finish
        multi_day = len(days) > 1

        # Every month has to exist before spans are computed
        for year, month in sorted({(d.year, d.month) for d in days}):
            grids.get_or_build(year, month)

        placed = []
        segment_index = 0
        i = 0
        try:
            while i < len(days):
                day = days[i]
                grid = grids.get_or_build(day.year, day.month)
                first_cell = self._locate(grid, day)
                row = grid.rows[first_cell.row]

                last_cell = first_cell
                next_index = i + 1
                if multi_day:
                    finish_cell = row.cell_for(finish_day)
                    if finish_cell is not None:
                        last_cell = finish_cell
                        next_index = len(days)
                    else:
                        last_cell = row.last_in_month_cell()
                        next_index = i + (last_cell.column - first_cell.column) + 1

                if multi_day:
                    kind = SegmentKind.SPAN if segment_index == 0 else SegmentKind.REPEAT
                else:
                    kind = SegmentKind.SINGLE

                if only_key is None or grid.key == only_key:
                    label = event.title if segment_index == 0 or event.repeat_title else ""
                    placed.append(self._place_segment(
                        event.id, label, grid, row, first_cell, last_cell, kind,
                        partial and last_cell.cell_date == finish_day,
                    ))

                segment_index += 1
                i = next_index
        except RenderingPrerequisiteError:
            # No segment of a failed placement stays on the grids
            self._unplace(grids, placed)
            raise

        _debug_print(f"{event.id}: {len(placed)} segment(s) over {len(days)} day(s)")
        return placed

    def _locate(self, grid: MonthGrid, day: date) -> DayCell:
        cell = grid.cell(day.day) if grid.contains(day) else None
        if cell is None:
            raise RenderingPrerequisiteError(f"No cell for {day.isoformat()} in grid {grid.key}")
        return cell

    def _unplace(self, grids: MonthGridCache, segments: list[PlacedEvent]) -> None:
        for segment in segments:
            grid = grids.get(segment.key)
            row = grid.rows[segment.row]
            for cell in row.cells:
                cell.events = [placed for placed in cell.events if placed is not segment]
            row.recompute_height(grid.base_row_height)
        if segments:
            _debug_print(f"{segments[0].event_id}: rolled back {len(segments)} segment(s)")

    def _place_segment(
        self,
        event_id: str,
        label: str,
        grid: MonthGrid,
        row: WeekRow,
        first_cell: DayCell,
        last_cell: DayCell,
        kind: SegmentKind,
        partial_finish: bool
    ) -> PlacedEvent:
        top = self.resolve_offset(row, first_cell.column, last_cell.column)
        segment = PlacedEvent(
            event_id=event_id,
            label=label,
            key=grid.key,
            row=row.index,
            left_cell=first_cell.column,
            right_cell=last_cell.column,
            first_day=first_cell.cell_date,
            last_day=last_cell.cell_date,
            top_offset=top,
            height=self.event_height,
            vertical_margin=top - self.base_offset,
            kind=kind,
            partial_finish=partial_finish,
        )
        first_cell.events.append(segment)
        row.recompute_height(grid.base_row_height)
        return segment

    def resolve_offset(self, row: WeekRow, left: int, right: int) -> int:
        """
        First free top offset for a segment covering columns left..right.

        Starts right below the day label and moves down by event_offset
        while the segment would overlap a segment sharing one of its columns.
        """
        neighbours = [placed for placed in row.placed_events() if placed.overlaps_columns(left, right)]
        top = self.base_offset
        collided = True
        while collided:
            collided = False
            for other in neighbours:
                if other.overlaps_vertically(top, self.event_height):
                    top += self.event_offset
                    collided = True
        return top
