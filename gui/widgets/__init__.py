"""
Kalgrid GUI Widgets

Custom widgets for displaying the month grid and its pickers.
"""

from .event_widget import EventWidget
from .calendar_widget import CalendarWidget, MonthView, MonthPickerView, YearPickerView, WidgetRenderer

__all__ = ['EventWidget', 'CalendarWidget', 'MonthView', 'MonthPickerView', 'YearPickerView', 'WidgetRenderer']
