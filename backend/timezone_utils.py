"""
Timezone utilities for Kalgrid.

The layout engine works on local wall-clock dates only. Aware datetimes
coming in through the API or from iCalendar files are converted to naive
local time here; naive datetimes are taken as already local.
"""

from datetime import datetime, date, time as dt_time
from typing import Optional, Union
import time as _time
import pytz


def get_local_timezone(timezone_name: Optional[str] = None):
    """
    Get the local timezone as a pytz timezone object.

    Args:
        timezone_name: Olson name such as "Europe/Amsterdam". When omitted,
            the system timezone is used.
    """
    if timezone_name:
        try:
            return pytz.timezone(timezone_name)
        except pytz.UnknownTimeZoneError:
            pass
    try:
        return pytz.timezone(_time.tzname[0])
    except pytz.UnknownTimeZoneError:
        # Abbreviations like "CET" are not always known to pytz
        if _time.localtime().tm_isdst:
            offset_seconds = -_time.altzone
        else:
            offset_seconds = -_time.timezone
        return pytz.FixedOffset(offset_seconds // 60)


def is_valid_timezone(timezone_name: str) -> bool:
    return timezone_name in pytz.all_timezones_set


def to_local_naive(dt: datetime, timezone_name: Optional[str] = None) -> datetime:
    """
    Convert a datetime to a naive local wall-clock datetime.

    Args:
        dt: Naive (assumed local) or aware datetime.
        timezone_name: Target timezone; the system timezone when omitted.

    Returns:
        A naive datetime (tzinfo=None).
    """
    if dt.tzinfo is None:
        return dt
    local_tz = get_local_timezone(timezone_name)
    return dt.astimezone(local_tz).replace(tzinfo=None)


def coerce_datetime(
    value: Union[str, date, datetime],
    timezone_name: Optional[str] = None
) -> datetime:
    """
    Turn an API timestamp into a naive local datetime.

    Accepts datetimes, dates (taken as midnight) and ISO-8601 strings.
    Raises ValueError or TypeError for anything else.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if isinstance(value, datetime):
        return to_local_naive(value, timezone_name)
    if isinstance(value, date):
        return datetime.combine(value, dt_time.min)
    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")
