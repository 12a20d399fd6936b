"""
Configuration for Kalgrid.

Options come either from a dict passed to `configure()` or from a TOML file
(`CalendarConfig.load`), which is turned into the same options dict.
"""

import copy
import os
import tomllib
import warnings
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Optional

from .errors import ConfigurationError, ValidationWarning
from .timezone_utils import is_valid_timezone


DEFAULT_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]

# Sunday first, matching first_day_of_week = 0
DEFAULT_WEEK_DAY_NAMES = [
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"
]

RECOGNIZED_OPTIONS = (
    'current_date',
    'first_day_of_week',
    'month_names',
    'week_day_names',
    'event_offset',
    'event_height',
    'day_label_height',
    'timezone',
    'colors',
    'on_month_change',
    'on_month_render',
)


@dataclass
class LayoutConfig:
    """Sizes used by the layout engine, in pixels."""
    event_offset: int = 5       # Step used to push a colliding event down; never 0
    event_height: int = 20      # Height of one event box
    day_label_height: int = 20  # Space taken by the day number above the events


@dataclass
class LocalizationConfig:
    """Month and week day names."""
    month_names: list[str] = None     # January ... December
    week_day_names: list[str] = None  # Sunday ... Saturday

    def __post_init__(self):
        if self.month_names is None:
            self.month_names = list(DEFAULT_MONTH_NAMES)
        if self.week_day_names is None:
            self.week_day_names = list(DEFAULT_WEEK_DAY_NAMES)

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""

    def get_week_day_name(self, weekday: int) -> str:
        """Get localized day name for weekday (0=Sunday, 6=Saturday)."""
        return self.week_day_names[weekday] if 0 <= weekday < len(self.week_day_names) else ""

    def header_names(self, first_day_of_week: int) -> list[str]:
        """Week day names rotated so the first column comes first."""
        names = self.week_day_names
        return names[first_day_of_week:] + names[:first_day_of_week]


@dataclass
class ColorsConfig:
    """Colors used by the desktop renderer."""
    cell_border: str = "#e0e0e0"
    header_background: str = "#f5f5f5"
    today_highlight_background: str = "#e3f2fd"
    today_highlight_text: str = "#1976d2"
    month_cell_current: str = "#ffffff"
    month_cell_other: str = "#f5f5f5"
    month_text_current: str = "#000000"
    month_text_other: str = "#999999"
    event_background: str = "#4285f4"
    picker_selected_background: str = "#e3f2fd"


@dataclass
class CalendarConfig:
    """Effective configuration of one calendar instance."""
    current_year: int
    current_month: int  # 1 = January
    current_day: int = 1
    first_day_of_week: int = 0  # 0 = Sunday
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    timezone: Optional[str] = None
    on_month_change: Optional[Callable[[int, int], None]] = field(default=None, repr=False)
    on_month_render: Optional[Callable[[int, int], None]] = field(default=None, repr=False)

    @property
    def event_offset(self) -> int:
        return self.layout.event_offset

    @property
    def month_names(self) -> list[str]:
        return self.localization.month_names

    @property
    def week_day_names(self) -> list[str]:
        return self.localization.week_day_names

    def snapshot(self) -> 'CalendarConfig':
        """Independent copy; callbacks are shared, everything else is copied."""
        return CalendarConfig(
            current_year=self.current_year,
            current_month=self.current_month,
            current_day=self.current_day,
            first_day_of_week=self.first_day_of_week,
            layout=copy.deepcopy(self.layout),
            localization=copy.deepcopy(self.localization),
            colors=copy.deepcopy(self.colors),
            timezone=self.timezone,
            on_month_change=self.on_month_change,
            on_month_render=self.on_month_render,
        )

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'kalgrid' / 'kalgrid.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None, **overrides) -> 'CalendarConfig':
        """Load configuration from a TOML file; keyword overrides win."""
        options = load_options(config_path)
        options.update(overrides)
        return configure(options)


def load_options(config_path: Optional[Path] = None) -> dict[str, Any]:
    """Read a TOML configuration file into a `configure()` options dict."""
    if config_path is None:
        config_path = CalendarConfig.get_default_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'rb') as f:
        data = tomllib.load(f)

    options: dict[str, Any] = {}

    general = data.get('General', {})
    for key in ('current_date', 'first_day_of_week', 'timezone'):
        if key in general:
            options[key] = general[key]

    layout_data = data.get('Layout', {})
    for key in ('event_offset', 'event_height', 'day_label_height'):
        if key in layout_data:
            options[key] = layout_data[key]

    # Space-separated names, as in "Jan Feb Mar ..."
    localization_data = data.get('Localization', {})
    month_names_str = localization_data.get('month_names', '')
    week_day_names_str = localization_data.get('week_day_names', '')
    if month_names_str:
        options['month_names'] = month_names_str.split()
    if week_day_names_str:
        options['week_day_names'] = week_day_names_str.split()

    colors_data = data.get('Colors', {})
    if colors_data:
        options['colors'] = dict(colors_data)

    return options


def _require_int(options: dict, name: str, default: int) -> int:
    value = options.get(name)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return value


def _parse_current_date(value) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            raise ConfigurationError(f"current_date is not an ISO date: {value!r}")
    raise ConfigurationError(f"current_date must be a date, got {value!r}")


def _parse_names(options: dict, name: str, count: int) -> Optional[list[str]]:
    value = options.get(name)
    if value is None:
        return None
    names = list(value)
    if len(names) != count or not all(isinstance(n, str) for n in names):
        raise ConfigurationError(f"{name} must hold exactly {count} strings, got {value!r}")
    return names


def _parse_colors(value) -> ColorsConfig:
    if value is None:
        return ColorsConfig()
    if isinstance(value, ColorsConfig):
        return copy.deepcopy(value)
    if not isinstance(value, dict):
        raise ConfigurationError(f"colors must be a table of color values, got {value!r}")
    known = ColorsConfig.__dataclass_fields__
    unknown = [key for key in value if key not in known]
    if unknown:
        warnings.warn(f"Ignoring unknown colors: {', '.join(unknown)}", ValidationWarning, stacklevel=3)
    return ColorsConfig(**{key: str(color) for key, color in value.items() if key in known})


def configure(options: Optional[dict[str, Any]] = None) -> CalendarConfig:
    """
    Build the effective configuration from user options.

    Recognized options: current_date, first_day_of_week, month_names,
    week_day_names, event_offset, event_height, day_label_height, timezone,
    colors, on_month_change, on_month_render. Missing options take their
    defaults; current_date defaults to today.

    An event_offset of 0 is replaced by 1 and reported with a
    ValidationWarning. Invalid values raise ConfigurationError.
    Equal options always give equal configurations.
    """
    options = dict(options or {})

    unknown = [key for key in options if key not in RECOGNIZED_OPTIONS]
    if unknown:
        warnings.warn(f"Ignoring unknown options: {', '.join(sorted(unknown))}", ValidationWarning, stacklevel=2)

    current = _parse_current_date(options.get('current_date'))

    first_day_of_week = _require_int(options, 'first_day_of_week', 0)
    if not 0 <= first_day_of_week <= 6:
        raise ConfigurationError(f"first_day_of_week must be 0-6, got {first_day_of_week}")

    event_offset = _require_int(options, 'event_offset', 5)
    if event_offset < 0:
        raise ConfigurationError(f"event_offset must not be negative, got {event_offset}")
    if event_offset == 0:
        warnings.warn(
            "event offset can not be zero, default value of 1 px is applied",
            ValidationWarning,
            stacklevel=2,
        )
        event_offset = 1

    event_height = _require_int(options, 'event_height', 20)
    if event_height < 1:
        raise ConfigurationError(f"event_height must be positive, got {event_height}")

    day_label_height = _require_int(options, 'day_label_height', 20)
    if day_label_height < 0:
        raise ConfigurationError(f"day_label_height must not be negative, got {day_label_height}")

    timezone = options.get('timezone')
    if timezone is not None and not is_valid_timezone(timezone):
        raise ConfigurationError(f"Unknown timezone: {timezone!r}")

    for callback_name in ('on_month_change', 'on_month_render'):
        callback = options.get(callback_name)
        if callback is not None and not callable(callback):
            raise ConfigurationError(f"{callback_name} must be callable")

    return CalendarConfig(
        current_year=current.year,
        current_month=current.month,
        current_day=current.day,
        first_day_of_week=first_day_of_week,
        layout=LayoutConfig(
            event_offset=event_offset,
            event_height=event_height,
            day_label_height=day_label_height,
        ),
        localization=LocalizationConfig(
            month_names=_parse_names(options, 'month_names', 12),
            week_day_names=_parse_names(options, 'week_day_names', 7),
        ),
        colors=_parse_colors(options.get('colors')),
        timezone=timezone,
        on_month_change=options.get('on_month_change'),
        on_month_render=options.get('on_month_render'),
    )
