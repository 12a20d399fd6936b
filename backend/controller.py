"""
Calendar controller for Kalgrid.

Owns the navigation state (shown year and month, which screen is active),
the grid cache and the event store of one calendar, and tells the renderer
what to show.
"""

from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from .config import CalendarConfig, configure
from .debug import debug_print
from .errors import ConfigurationError, NavigationError
from .event_placer import EventPlacer
from .event_store import EventStore
from .ics_import import events_from_ical, load_ics_file
from .month_grid import MonthGrid, MonthGridCache, month_key, shift_month
from .renderer import NullRenderer, Renderer


def _debug_print(message: str) -> None:
    debug_print("CALENDAR", message)


class ViewState(Enum):
    MONTH_VIEW = "month_view"
    MONTH_PICKER = "month_picker"
    YEAR_PICKER = "year_picker"


class CalendarController:
    """
    One calendar instance.

    Navigation:
        month view --open_month_picker--> month picker
        month picker --open_year_picker--> year picker
        month picker --pick_month--> month view
        year picker --pick_year--> month picker

    Every entry into the month view reuses the cached grid of that month
    (or builds it), places stored events still missing from it, renders it
    and calls on_month_change; on_month_render is called only the first
    time a month is displayed.
    """

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        options: Optional[dict[str, Any]] = None,
        config: Optional[CalendarConfig] = None
    ):
        if renderer is None:
            renderer = NullRenderer()
        elif not isinstance(renderer, Renderer):
            raise ConfigurationError(f"Invalid renderer: {renderer!r}")
        if config is not None and options is not None:
            raise ConfigurationError("Pass either options or config, not both")

        self._renderer = renderer
        self._config = config.snapshot() if config is not None else configure(options)
        self._year = self._config.current_year
        self._month = self._config.current_month
        self._state = ViewState.MONTH_VIEW

        layout = self._config.layout
        self._grids = MonthGridCache(self._config.first_day_of_week, layout.day_label_height)
        self._placer = EventPlacer.from_config(self._config)
        self._store = EventStore(self._placer, self._grids, self._config.timezone)
        self._displayed_keys: set[str] = set()

        self._show_month_view()

    # ==================== State ====================

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def current_key(self) -> str:
        return month_key(self._year, self._month)

    @property
    def current_grid(self) -> Optional[MonthGrid]:
        return self._grids.get(self.current_key)

    @property
    def decade_start(self) -> int:
        return self._year // 10 * 10

    @property
    def grids(self) -> MonthGridCache:
        return self._grids

    @property
    def store(self) -> EventStore:
        return self._store

    def get_options(self) -> CalendarConfig:
        """Snapshot of the configuration, with the shown month as current."""
        snapshot = self._config.snapshot()
        snapshot.current_year = self._year
        snapshot.current_month = self._month
        return snapshot

    # ==================== Events ====================

    def add_event(
        self,
        title: str,
        start_date,
        finish_date=None,
        duration: Optional[int] = None,
        event_id: Optional[str] = None,
        repeat_title: bool = False,
        on_click: Optional[Callable] = None
    ) -> bool:
        """
        Add an event.

        Args:
            title: Text shown on the event
            start_date: datetime, date or ISO-8601 string
            finish_date: Same types; defaults to start + duration
            duration: Minutes, used when finish_date is omitted (default 60)
            event_id: Generated when omitted
            repeat_title: Show the title on every row the event wraps onto
            on_click: Callback handed to the renderer

        Returns:
            True if the event was stored and placed.
        """
        result = self._store.add({
            'event_id': event_id,
            'title': title,
            'start_date': start_date,
            'finish_date': finish_date,
            'duration': duration,
            'repeat_title': repeat_title,
            'on_click': on_click,
        })
        if result:
            self._refresh_shown_month()
        return bool(result)

    def delete_event(self, event_id: str) -> bool:
        """Delete an event from every month; False if the id is unknown."""
        result = self._store.delete(event_id)
        if result:
            self._refresh_shown_month()
        return bool(result)

    def update_event(self, event_id: str, **changes) -> bool:
        """
        Change an event; False if the id is unknown or the change is invalid.

        Accepts the keyword arguments of add_event. Stacking of other events
        in the affected cells is not guaranteed to stay the same.
        """
        result = self._store.update(event_id, changes)
        if result:
            self._refresh_shown_month()
        return bool(result)

    def import_ical(self, ical_text: str) -> int:
        """Add the events of an iCalendar document; returns how many were added."""
        return self._add_all(events_from_ical(ical_text, self._config.timezone))

    def import_ics_file(self, path: Path) -> int:
        """Add the events of an .ics file; returns how many were added."""
        return self._add_all(load_ics_file(path, self._config.timezone))

    def _add_all(self, options_list: list[dict[str, Any]]) -> int:
        added = 0
        for options in options_list:
            if self._store.add(options):
                added += 1
        self._refresh_shown_month()
        _debug_print(f"Imported {added} event(s)")
        return added

    def _refresh_shown_month(self) -> None:
        grid = self.current_grid
        if self._state is ViewState.MONTH_VIEW and grid is not None:
            self._renderer.refresh_month(grid)

    # ==================== Navigation ====================

    def _require_state(self, *states: ViewState) -> None:
        if self._state not in states:
            raise NavigationError(f"Not available in {self._state.value}")

    def _check_year(self, year: int) -> int:
        if not date.min.year <= year <= date.max.year:
            raise NavigationError(f"Year out of range: {year}")
        return year

    def _step_month(self, delta: int) -> None:
        self._check_year((self._year * 12 + self._month - 1 + delta) // 12)
        self._year, self._month = shift_month(self._year, self._month, delta)

    def next_month(self) -> None:
        self._require_state(ViewState.MONTH_VIEW)
        self._step_month(1)
        self._show_month_view()

    def previous_month(self) -> None:
        self._require_state(ViewState.MONTH_VIEW)
        self._step_month(-1)
        self._show_month_view()

    def open_month_picker(self) -> None:
        self._require_state(ViewState.MONTH_VIEW)
        self._show_month_picker()

    def next_year(self) -> None:
        self._require_state(ViewState.MONTH_PICKER)
        self._year = self._check_year(self._year + 1)
        self._show_month_picker()

    def previous_year(self) -> None:
        self._require_state(ViewState.MONTH_PICKER)
        self._year = self._check_year(self._year - 1)
        self._show_month_picker()

    def pick_month(self, month: int) -> None:
        """Choose a month (1-12) of the picker's year."""
        self._require_state(ViewState.MONTH_PICKER)
        if not 1 <= month <= 12:
            raise NavigationError(f"Month must be 1-12, got {month}")
        self._month = month
        self._show_month_view()

    def open_year_picker(self) -> None:
        self._require_state(ViewState.MONTH_PICKER)
        self._show_year_picker()

    def next_decade(self) -> None:
        self._require_state(ViewState.YEAR_PICKER)
        self._year = self._check_year(self._year + 10)
        self._show_year_picker()

    def previous_decade(self) -> None:
        self._require_state(ViewState.YEAR_PICKER)
        self._year = self._check_year(self._year - 10)
        self._show_year_picker()

    def pick_year(self, year: int) -> None:
        """Choose a year; the month picker of that year is shown next."""
        self._require_state(ViewState.YEAR_PICKER)
        self._year = self._check_year(year)
        self._show_month_picker()

    def go_to_date(self, d: date) -> None:
        """Show the month of a date, from any screen."""
        self._year, self._month = d.year, d.month
        self._show_month_view()

    def go_today(self) -> None:
        self.go_to_date(date.today())

    def _show_month_picker(self) -> None:
        self._state = ViewState.MONTH_PICKER
        self._renderer.show_month_picker(self._year, self._config)

    def _show_year_picker(self) -> None:
        self._state = ViewState.YEAR_PICKER
        self._renderer.show_year_picker(self.decade_start, self._config)

    def _show_month_view(self) -> None:
        self._state = ViewState.MONTH_VIEW
        grid = self._grids.get_or_build(self._year, self._month)
        self._place_missing(grid)
        self._renderer.show_month(grid, self._config)

        first_display = grid.key not in self._displayed_keys
        self._displayed_keys.add(grid.key)
        _debug_print(f"Showing {grid.key} (first display: {first_display})")

        if self._config.on_month_change:
            self._config.on_month_change(self._year, self._month)
        if first_display and self._config.on_month_render:
            self._config.on_month_render(self._year, self._month)

    def _place_missing(self, grid: MonthGrid) -> None:
        # Usually a no-op: add() already places events on every month they
        # touch. Covers grids whose placements were stripped after the add.
        placed_ids = grid.event_ids()
        for event in self._store.events_in_month(grid.year, grid.month):
            if event.id not in placed_ids:
                self._placer.place(event, self._grids, only_key=grid.key)
