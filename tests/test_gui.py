from datetime import date, datetime

import pytest

pytest.importorskip("PySide6")
pytest.importorskip("pytestqt")

from PySide6.QtCore import Qt

from backend.controller import CalendarController
from backend.event_placer import SegmentKind
from gui.widgets.calendar_widget import CalendarWidget


@pytest.fixture
def calendar(qtbot):
    widget = CalendarWidget()
    qtbot.addWidget(widget)
    controller = CalendarController(
        renderer=widget.renderer,
        options={'current_date': date(2024, 2, 1)},
    )
    widget.bind(controller)
    return widget, controller


def test_month_view_has_one_row_widget_per_week(calendar):
    widget, _ = calendar
    assert len(widget.month_view.row_widgets) == 5
    assert widget.current_page() is widget._month_page


def test_multi_day_event_gets_one_widget_per_segment(calendar):
    widget, controller = calendar

    controller.add_event("Trip", datetime(2024, 2, 10, 9), datetime(2024, 2, 12, 10), event_id="trip")

    event_widgets = [w for row in widget.month_view.row_widgets for w in row.event_widgets]
    assert len(event_widgets) == 2
    assert [w.placed.kind for w in event_widgets] == [SegmentKind.SPAN, SegmentKind.REPEAT]


def test_picker_pages_follow_controller(calendar):
    widget, controller = calendar

    controller.open_month_picker()
    assert widget.current_page() is widget._month_picker
    controller.open_year_picker()
    assert widget.current_page() is widget._year_picker
    controller.pick_year(2026)
    controller.pick_month(5)
    assert widget.current_page() is widget._month_page


def test_month_shown_signal(calendar, qtbot):
    widget, controller = calendar

    with qtbot.waitSignal(widget.month_shown) as blocker:
        controller.next_month()

    assert blocker.args == [2024, 3]


def test_clicking_event_calls_on_click(calendar, qtbot):
    widget, controller = calendar
    clicked = []
    controller.add_event("Dentist", datetime(2024, 2, 14, 9), event_id="dentist", on_click=clicked.append)
    widget.resize(800, 600)
    widget.show()
    qtbot.waitExposed(widget)

    [event_widget] = [w for row in widget.month_view.row_widgets for w in row.event_widgets]
    with qtbot.waitSignal(widget.event_clicked) as blocker:
        qtbot.mouseClick(event_widget, Qt.LeftButton)

    assert blocker.args == ["dentist"]
    assert clicked == ["dentist"]
