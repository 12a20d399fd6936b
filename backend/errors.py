"""
Error taxonomy for Kalgrid.

Setup and navigation mistakes raise; per-event problems (unknown ids,
invalid event data) are reported through return values instead.
"""


class CalendarError(Exception):
    """Base class for all calendar errors."""


class ConfigurationError(CalendarError):
    """Invalid construction argument or option value. Construction aborts."""


class RenderingPrerequisiteError(CalendarError):
    """An event could not be placed because its target cell is missing."""


class NavigationError(CalendarError):
    """A navigation action was requested from a view that does not offer it."""


class ValidationWarning(UserWarning):
    """A recoverable option problem that was replaced by a safe value."""
