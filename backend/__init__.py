"""
Kalgrid Backend Module

This module provides the core of the month calendar:
- Configuration (config.py)
- Calendar-day expansion of events (date_range.py)
- Month grid generation and caching (month_grid.py)
- Event layout and stacking (event_placer.py)
- Event records and store (event_store.py)
- Navigation controller (controller.py)
- Renderer interface (renderer.py)
- iCalendar import (ics_import.py)
"""

from .config import CalendarConfig, configure
from .controller import CalendarController, ViewState
from .date_range import DateRange, expand
from .errors import (
    CalendarError,
    ConfigurationError,
    NavigationError,
    RenderingPrerequisiteError,
    ValidationWarning,
)
from .event_placer import EventPlacer, PlacedEvent, SegmentKind
from .event_store import CalendarEvent, EventStore, Outcome, StoreResult
from .month_grid import MonthGrid, MonthGridCache, build_month_grid, month_key
from .renderer import NullRenderer, Renderer

__all__ = [
    'CalendarConfig',
    'configure',
    'CalendarController',
    'ViewState',
    'DateRange',
    'expand',
    'CalendarError',
    'ConfigurationError',
    'NavigationError',
    'RenderingPrerequisiteError',
    'ValidationWarning',
    'EventPlacer',
    'PlacedEvent',
    'SegmentKind',
    'CalendarEvent',
    'EventStore',
    'Outcome',
    'StoreResult',
    'MonthGrid',
    'MonthGridCache',
    'build_month_grid',
    'month_key',
    'NullRenderer',
    'Renderer',
]
