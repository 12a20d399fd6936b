"""
Renderer interface used by the calendar controller.

The controller never draws anything itself. It hands grids and picker
state to a renderer, which may be a desktop widget (see gui.widgets) or
nothing at all.
"""

from abc import ABC, abstractmethod

from .config import CalendarConfig
from .month_grid import MonthGrid


class Renderer(ABC):
    """Receives the screens the controller wants to show."""

    @abstractmethod
    def show_month(self, grid: MonthGrid, config: CalendarConfig) -> None:
        """Display a month grid with its placed events."""

    @abstractmethod
    def show_month_picker(self, year: int, config: CalendarConfig) -> None:
        """Display the twelve months of a year."""

    @abstractmethod
    def show_year_picker(self, first_year: int, config: CalendarConfig) -> None:
        """Display the ten years of the decade starting at first_year."""

    @abstractmethod
    def refresh_month(self, grid: MonthGrid) -> None:
        """Redraw a shown grid after events were added, changed or removed."""


class NullRenderer(Renderer):
    """Renderer that draws nothing; used for headless calendars."""

    def show_month(self, grid: MonthGrid, config: CalendarConfig) -> None:
        pass

    def show_month_picker(self, year: int, config: CalendarConfig) -> None:
        pass

    def show_year_picker(self, first_year: int, config: CalendarConfig) -> None:
        pass

    def refresh_month(self, grid: MonthGrid) -> None:
        pass
