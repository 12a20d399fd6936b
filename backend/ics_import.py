"""
iCalendar import for Kalgrid.

Turns the VEVENTs of a VCALENDAR document into add-event options. Only the
stored occurrence of an event is imported; RRULEs are not expanded.
"""

from datetime import datetime, date, time as dt_time, timedelta
from pathlib import Path
from typing import Any, Optional

from icalendar import Calendar as ICalCalendar

from .debug import debug_print
from .timezone_utils import to_local_naive


def _debug_print(message: str) -> None:
    debug_print("ICS", message)


def parse_icalendar(ical_text: str) -> ICalCalendar:
    """
    Parse iCalendar text into an icalendar.Calendar object.

    Args:
        ical_text: Raw iCalendar text (VCALENDAR)

    Returns:
        Parsed Calendar object
    """
    return ICalCalendar.from_ical(ical_text)


def _to_local(value, timezone_name: Optional[str]) -> datetime:
    if isinstance(value, datetime):
        return to_local_naive(value, timezone_name)
    if isinstance(value, date):
        # All-day values start at local midnight
        return datetime.combine(value, dt_time.min)
    raise ValueError(f"Unsupported iCalendar date value: {value!r}")


def event_options(component, timezone_name: Optional[str] = None) -> Optional[dict[str, Any]]:
    """
    Add-event options for one VEVENT, or None if it has no start.

    All-day events end on an exclusive midnight (DTEND = next day); the
    store's midnight rule keeps them on their own days.
    """
    dtstart = component.get('DTSTART')
    if dtstart is None:
        return None

    start = _to_local(dtstart.dt, timezone_name)
    options: dict[str, Any] = {
        'title': str(component.get('SUMMARY', 'Untitled')),
        'start_date': start,
    }

    uid = component.get('UID')
    if uid:
        options['event_id'] = str(uid)

    dtend = component.get('DTEND')
    duration = component.get('DURATION')
    if dtend is not None:
        options['finish_date'] = _to_local(dtend.dt, timezone_name)
    elif duration is not None and isinstance(duration.dt, timedelta):
        options['duration'] = int(duration.dt.total_seconds() // 60)
    elif not isinstance(dtstart.dt, datetime):
        # All-day event without an end lasts that one day
        options['finish_date'] = start + timedelta(days=1)

    if component.get('RRULE') is not None:
        _debug_print(f"{options['title']}: recurrence rule ignored")

    return options


def events_from_ical(ical_text: str, timezone_name: Optional[str] = None) -> list[dict[str, Any]]:
    """Add-event options for every VEVENT of a VCALENDAR document."""
    calendar = parse_icalendar(ical_text)
    result = []
    for component in calendar.walk('VEVENT'):
        options = event_options(component, timezone_name)
        if options is None:
            _debug_print("Skipping VEVENT without DTSTART")
            continue
        result.append(options)
    return result


def load_ics_file(path: Path, timezone_name: Optional[str] = None) -> list[dict[str, Any]]:
    """Read an .ics file and return the add-event options of its VEVENTs."""
    with open(path, 'r', encoding='utf-8') as f:
        return events_from_ical(f.read(), timezone_name)
