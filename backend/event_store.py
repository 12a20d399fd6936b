"""
In-memory event store for Kalgrid.

Holds the event records of one calendar and keeps the month grids in step:
adding an event places it, deleting strips its placements from every cached
grid, updating is delete followed by add.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Iterator, Optional

from .date_range import DateRange, expand
from .debug import debug_print
from .event_placer import EventPlacer, PlacedEvent
from .month_grid import MonthGridCache
from .timezone_utils import coerce_datetime


DEFAULT_DURATION_MINUTES = 60

EVENT_OPTIONS = (
    'event_id',
    'title',
    'start_date',
    'finish_date',
    'duration',
    'repeat_title',
    'on_click',
)


def _debug_print(message: str) -> None:
    debug_print("STORE", message)


class InvalidEventError(ValueError):
    """Event options that cannot be turned into a valid event."""


class Outcome(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


@dataclass
class StoreResult:
    """Result of a store operation; truthy only when it succeeded."""
    outcome: Outcome
    event: Optional['CalendarEvent'] = None
    placements: list[PlacedEvent] = field(default_factory=list)
    message: str = ""

    def __bool__(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass
class CalendarEvent:
    """A normalized event record."""
    id: str
    title: str
    start: datetime
    finish: datetime
    duration_minutes: Optional[int] = None
    repeat_title: bool = False
    on_click: Optional[Callable] = field(default=None, repr=False, compare=False)

    def date_range(self) -> DateRange:
        return expand(self.start, self.finish)

    def touches_month(self, year: int, month: int) -> bool:
        return self.date_range().intersects_month(year, month)

    def to_options(self) -> dict[str, Any]:
        """Options that recreate this event through EventStore.add()."""
        return {
            'event_id': self.id,
            'title': self.title,
            'start_date': self.start,
            'finish_date': self.finish,
            'duration': self.duration_minutes,
            'repeat_title': self.repeat_title,
            'on_click': self.on_click,
        }

    @classmethod
    def from_options(
        cls,
        options: dict[str, Any],
        event_id: str,
        timezone_name: Optional[str] = None
    ) -> 'CalendarEvent':
        """
        Validate and normalize add-event options.

        The finish defaults to start + duration (60 minutes when no duration
        is given). A finish at exactly midnight is moved back one minute so a
        same-day event does not reach into the next day.

        Raises:
            InvalidEventError: missing title or start, bad timestamps or
                durations, or a finish before the start.
        """
        title = options.get('title')
        if title is None:
            raise InvalidEventError("title is required")
        if options.get('start_date') is None:
            raise InvalidEventError("start_date is required")

        try:
            start = coerce_datetime(options['start_date'], timezone_name)
            finish_value = options.get('finish_date')
            finish = coerce_datetime(finish_value, timezone_name) if finish_value is not None else None
        except (TypeError, ValueError) as e:
            raise InvalidEventError(f"bad timestamp: {e}") from e

        duration = options.get('duration')
        if duration is not None and (isinstance(duration, bool) or not isinstance(duration, int) or duration < 0):
            raise InvalidEventError(f"duration must be a non-negative number of minutes, got {duration!r}")

        if finish is None:
            finish = start + timedelta(minutes=duration if duration is not None else DEFAULT_DURATION_MINUTES)

        if finish.hour == 0 and finish.minute == 0:
            shifted = finish - timedelta(minutes=1)
            if shifted >= start:
                finish = shifted

        if finish < start:
            raise InvalidEventError(f"finish {finish} is before start {start}")

        return cls(
            id=event_id,
            title=str(title),
            start=start,
            finish=finish,
            duration_minutes=duration,
            repeat_title=bool(options.get('repeat_title', False)),
            on_click=options.get('on_click'),
        )


class EventStore:
    """
    Event records keyed by id, plus their placement on the month grids.

    Belongs to exactly one calendar; two calendars never share a store.
    """

    def __init__(
        self,
        placer: EventPlacer,
        grids: MonthGridCache,
        timezone_name: Optional[str] = None
    ):
        self._placer = placer
        self._grids = grids
        self._timezone_name = timezone_name
        self._events: dict[str, CalendarEvent] = {}

    @staticmethod
    def _key(event_id) -> str:
        # Ids are stored as strings, so 5 and "5" name the same event
        return str(event_id)

    def _generate_id(self) -> str:
        while True:
            event_id = uuid.uuid4().hex[:12]
            if event_id not in self._events:
                return event_id

    def _build_event(self, options: dict[str, Any]) -> CalendarEvent:
        event_id = options.get('event_id')
        if event_id is None or event_id == "":
            event_id = self._generate_id()
        return CalendarEvent.from_options(options, self._key(event_id), self._timezone_name)

    def add(self, options: dict[str, Any]) -> StoreResult:
        """
        Store an event and place it on every day it touches.

        Adding an id that is already stored replaces the record and places
        the event again without removing the earlier placements; use
        update() to change an existing event.
        """
        try:
            event = self._build_event(options)
        except InvalidEventError as e:
            _debug_print(f"Rejected event: {e}")
            return StoreResult(Outcome.INVALID, message=str(e))

        if event.id in self._events:
            _debug_print(f"Event {event.id} added again without delete")
        # A placement that raises leaves neither record nor segments behind
        placements = self._placer.place(event, self._grids)
        self._events[event.id] = event
        return StoreResult(Outcome.OK, event=event, placements=placements)

    def delete(self, event_id: str) -> StoreResult:
        """Remove an event and its placements from every cached grid."""
        event_id = self._key(event_id)
        event = self._events.pop(event_id, None)
        if event is None:
            return StoreResult(Outcome.NOT_FOUND, message=f"Unknown event id: {event_id}")

        removed = 0
        for grid in self._grids:
            removed += grid.remove_event(event_id)
        _debug_print(f"Deleted {event_id}: {removed} placement(s) removed")
        return StoreResult(Outcome.OK, event=event)

    def update(self, event_id: str, changes: dict[str, Any]) -> StoreResult:
        """
        Replace an event by merging `changes` into its options.

        Implemented as delete followed by add, so other events sharing the
        affected cells may be stacked differently afterwards. Invalid changes
        leave the store untouched.
        """
        event_id = self._key(event_id)
        current = self._events.get(event_id)
        if current is None:
            return StoreResult(Outcome.NOT_FOUND, message=f"Unknown event id: {event_id}")

        merged = current.to_options()
        if 'duration' in changes and 'finish_date' not in changes:
            # A new duration only counts when the finish is not pinned
            merged['finish_date'] = None
        merged.update(changes)
        if merged.get('event_id') is None:
            merged['event_id'] = event_id

        try:
            self._build_event(merged)
        except InvalidEventError as e:
            return StoreResult(Outcome.INVALID, message=str(e))

        self.delete(event_id)
        return self.add(merged)

    def get(self, event_id: str) -> Optional[CalendarEvent]:
        return self._events.get(self._key(event_id))

    def events_in_month(self, year: int, month: int) -> list[CalendarEvent]:
        return [event for event in self._events.values() if event.touches_month(year, month)]

    def __contains__(self, event_id: str) -> bool:
        return self._key(event_id) in self._events

    def __iter__(self) -> Iterator[CalendarEvent]:
        return iter(list(self._events.values()))

    def __len__(self) -> int:
        return len(self._events)
