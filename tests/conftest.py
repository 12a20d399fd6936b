import os
from datetime import date

import pytest

# Must be set before any QApplication exists
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from backend.controller import CalendarController
from backend.renderer import Renderer


class RecordingRenderer(Renderer):
    """Keeps every call so tests can check what would have been drawn."""

    def __init__(self):
        self.calls = []

    def show_month(self, grid, config):
        self.calls.append(("month", grid.key))

    def show_month_picker(self, year, config):
        self.calls.append(("month_picker", year))

    def show_year_picker(self, first_year, config):
        self.calls.append(("year_picker", first_year))

    def refresh_month(self, grid):
        self.calls.append(("refresh", grid.key))


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def make_controller(renderer):
    def factory(**options):
        options.setdefault("current_date", date(2024, 2, 1))
        return CalendarController(renderer=renderer, options=options)
    return factory
