"""
Calendar Widget with month view, month picker and year picker.

Renders what the CalendarController computes: week rows are sized from
WeekRow.height and event segments are positioned from their PlacedEvent
geometry, so no layout decisions are made here.
"""

from datetime import date
from typing import Callable, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
    QFrame, QPushButton, QScrollArea, QStackedWidget
)
from PySide6.QtCore import Qt, Signal

from backend.config import CalendarConfig, ColorsConfig
from backend.month_grid import DAYS_PER_WEEK, DayCell, MonthGrid, WeekRow
from backend.renderer import Renderer
from .event_widget import EventWidget


class MonthDayCell(QFrame):
    """Background and day number of one grid cell."""

    clicked = Signal(date)

    def __init__(self, cell: DayCell, colors: ColorsConfig, label_height: int, parent=None):
        super().__init__(parent)
        self.cell = cell
        self._colors = colors
        self._label_height = label_height
        self._setup_ui()

    def _setup_ui(self):
        self._day_label = QLabel(str(self.cell.day) if self.cell.in_month else "", self)
        self._day_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self._day_label.setGeometry(4, 2, 40, max(self._label_height - 2, 0))
        self._update_style()

    def _update_style(self):
        colors = self._colors
        bg = colors.month_cell_current if self.cell.in_month else colors.month_cell_other
        text = colors.month_text_current if self.cell.in_month else colors.month_text_other

        if self.cell.cell_date == date.today():
            self._day_label.setStyleSheet(f"color: {colors.today_highlight_text}; font-weight: bold; background: {colors.today_highlight_background}; border-radius: 6px; padding: 0px 4px;")
        else:
            self._day_label.setStyleSheet(f"color: {text};")

        self.setStyleSheet(f"MonthDayCell {{ background-color: {bg}; border: 1px solid {colors.cell_border}; }}")

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton and self.cell.cell_date is not None:
            self.clicked.emit(self.cell.cell_date)
        super().mousePressEvent(event)


class WeekRowWidget(QWidget):
    """
    One week of the month view.

    Cells and events are children positioned by hand: a multi-day segment
    spans several cells, which a grid layout cannot express.
    """

    day_clicked = Signal(date)
    event_clicked = Signal(str)

    def __init__(
        self,
        row: WeekRow,
        colors: ColorsConfig,
        label_height: int,
        click_handler: Optional[Callable[[str], Optional[Callable]]] = None,
        parent=None
    ):
        super().__init__(parent)
        self.row = row
        self._cells: list[MonthDayCell] = []
        self._event_widgets: list[EventWidget] = []

        self.setFixedHeight(row.height + 4)
        self.setMinimumWidth(DAYS_PER_WEEK * 40)

        for cell in row.cells:
            cell_widget = MonthDayCell(cell, colors, label_height, self)
            cell_widget.clicked.connect(self.day_clicked.emit)
            self._cells.append(cell_widget)

        for placed in row.placed_events():
            on_click = click_handler(placed.event_id) if click_handler else None
            widget = EventWidget(placed, colors, on_click, self)
            widget.clicked.connect(self.event_clicked.emit)
            self._event_widgets.append(widget)

        self._position_children()

    @property
    def event_widgets(self) -> list[EventWidget]:
        return list(self._event_widgets)

    def _column_width(self) -> float:
        return self.width() / DAYS_PER_WEEK

    def _position_children(self):
        col_width = self._column_width()
        height = self.height()
        for cell_widget in self._cells:
            x = int(cell_widget.cell.column * col_width)
            cell_widget.setGeometry(x, 0, int((cell_widget.cell.column + 1) * col_width) - x, height)
        for widget in self._event_widgets:
            placed = widget.placed
            x = int(placed.left_cell * col_width) + 2
            width = int(placed.span * col_width) - 4
            widget.setGeometry(x, placed.top_offset, max(width, 1), placed.height)
            widget.raise_()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._position_children()


class MonthView(QWidget):
    """Week day header plus the week rows of one month grid."""

    day_clicked = Signal(date)
    event_clicked = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._grid: Optional[MonthGrid] = None
        self._config: Optional[CalendarConfig] = None
        self._row_widgets: list[WeekRowWidget] = []
        self._header_labels: list[QLabel] = []
        self.click_handler: Optional[Callable[[str], Optional[Callable]]] = None
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QWidget()
        self._header_layout = QHBoxLayout(header)
        self._header_layout.setContentsMargins(0, 0, 0, 0)
        self._header_layout.setSpacing(1)
        for _ in range(DAYS_PER_WEEK):
            label = QLabel()
            label.setAlignment(Qt.AlignCenter)
            self._header_layout.addWidget(label, 1)
            self._header_labels.append(label)
        layout.addWidget(header)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        rows_container = QWidget()
        self._rows_layout = QVBoxLayout(rows_container)
        self._rows_layout.setContentsMargins(0, 0, 0, 0)
        self._rows_layout.setSpacing(0)
        self._rows_layout.addStretch()
        scroll.setWidget(rows_container)
        layout.addWidget(scroll, 1)

    @property
    def grid(self) -> Optional[MonthGrid]:
        return self._grid

    @property
    def row_widgets(self) -> list[WeekRowWidget]:
        return list(self._row_widgets)

    def set_grid(self, grid: MonthGrid, config: CalendarConfig):
        self._grid = grid
        self._config = config

        names = config.localization.header_names(grid.first_day_of_week)
        for label, name in zip(self._header_labels, names):
            label.setText(name)
            label.setStyleSheet(f"font-weight: bold; padding: 6px; background: {config.colors.header_background};")

        self.refresh()

    def refresh(self):
        """Rebuild the rows from the grid's current placements."""
        for widget in self._row_widgets:
            self._rows_layout.removeWidget(widget)
            widget.deleteLater()
        self._row_widgets.clear()

        if self._grid is None:
            return

        for index, row in enumerate(self._grid.rows):
            widget = WeekRowWidget(
                row,
                self._config.colors,
                self._config.layout.day_label_height,
                self.click_handler,
            )
            widget.day_clicked.connect(self.day_clicked.emit)
            widget.event_clicked.connect(self.event_clicked.emit)
            self._rows_layout.insertWidget(index, widget)
            self._row_widgets.append(widget)


class MonthPickerView(QWidget):
    """The twelve months of a year."""

    previous_year = Signal()
    next_year = Signal()
    year_header_clicked = Signal()
    month_picked = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._month_buttons: list[QPushButton] = []
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        prev_button = QPushButton("<<")
        prev_button.clicked.connect(self.previous_year.emit)
        self._year_button = QPushButton()
        self._year_button.clicked.connect(self.year_header_clicked.emit)
        next_button = QPushButton(">>")
        next_button.clicked.connect(self.next_year.emit)
        header.addWidget(prev_button)
        header.addWidget(self._year_button, 1)
        header.addWidget(next_button)
        layout.addLayout(header)

        months = QGridLayout()
        for i in range(12):
            button = QPushButton()
            button.clicked.connect(lambda checked=False, month=i + 1: self.month_picked.emit(month))
            months.addWidget(button, i // 3, i % 3)
            self._month_buttons.append(button)
        layout.addLayout(months)
        layout.addStretch()

    def set_year(self, year: int, config: CalendarConfig):
        self._year_button.setText(str(year))
        for i, button in enumerate(self._month_buttons):
            button.setText(config.localization.get_month_name(i + 1))


class YearPickerView(QWidget):
    """The ten years of a decade."""

    previous_decade = Signal()
    next_decade = Signal()
    year_picked = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._year_buttons: list[QPushButton] = []
        self._first_year = 0
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        prev_button = QPushButton("<<")
        prev_button.clicked.connect(self.previous_decade.emit)
        self._decade_label = QLabel()
        self._decade_label.setAlignment(Qt.AlignCenter)
        next_button = QPushButton(">>")
        next_button.clicked.connect(self.next_decade.emit)
        header.addWidget(prev_button)
        header.addWidget(self._decade_label, 1)
        header.addWidget(next_button)
        layout.addLayout(header)

        years = QGridLayout()
        for i in range(10):
            button = QPushButton()
            button.clicked.connect(lambda checked=False, offset=i: self.year_picked.emit(self._first_year + offset))
            years.addWidget(button, i // 5, i % 5)
            self._year_buttons.append(button)
        layout.addLayout(years)
        layout.addStretch()

    def set_decade(self, first_year: int):
        self._first_year = first_year
        self._decade_label.setText(f"{first_year} - {first_year + 9}")
        for i, button in enumerate(self._year_buttons):
            button.setText(str(first_year + i))
            button.setEnabled(date.min.year <= first_year + i <= date.max.year)


class WidgetRenderer(Renderer):
    """Renderer that forwards to a CalendarWidget."""

    def __init__(self, widget: 'CalendarWidget'):
        self._widget = widget

    def show_month(self, grid: MonthGrid, config: CalendarConfig) -> None:
        self._widget.show_month(grid, config)

    def show_month_picker(self, year: int, config: CalendarConfig) -> None:
        self._widget.show_month_picker(year, config)

    def show_year_picker(self, first_year: int, config: CalendarConfig) -> None:
        self._widget.show_year_picker(first_year)

    def refresh_month(self, grid: MonthGrid) -> None:
        self._widget.refresh_month(grid)


class CalendarWidget(QWidget):
    """Month calendar with its navigation bar and picker screens."""

    event_clicked = Signal(str)
    day_clicked = Signal(date)
    month_shown = Signal(int, int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._controller = None
        self.renderer = WidgetRenderer(self)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._stack = QStackedWidget()

        month_page = QWidget()
        month_layout = QVBoxLayout(month_page)
        month_layout.setContentsMargins(0, 0, 0, 0)
        nav = QHBoxLayout()
        self._prev_button = QPushButton("<")
        self._title_button = QPushButton()
        self._next_button = QPushButton(">")
        nav.addWidget(self._prev_button)
        nav.addWidget(self._title_button, 1)
        nav.addWidget(self._next_button)
        month_layout.addLayout(nav)
        self._month_view = MonthView()
        self._month_view.click_handler = self._event_callback
        self._month_view.event_clicked.connect(self.event_clicked.emit)
        self._month_view.day_clicked.connect(self.day_clicked.emit)
        month_layout.addWidget(self._month_view, 1)

        self._month_picker = MonthPickerView()
        self._year_picker = YearPickerView()

        self._stack.addWidget(month_page)
        self._stack.addWidget(self._month_picker)
        self._stack.addWidget(self._year_picker)
        self._month_page = month_page
        layout.addWidget(self._stack)

    def bind(self, controller) -> None:
        """Route the navigation buttons to a CalendarController."""
        self._controller = controller
        self._prev_button.clicked.connect(controller.previous_month)
        self._next_button.clicked.connect(controller.next_month)
        self._title_button.clicked.connect(controller.open_month_picker)
        self._month_picker.previous_year.connect(controller.previous_year)
        self._month_picker.next_year.connect(controller.next_year)
        self._month_picker.year_header_clicked.connect(controller.open_year_picker)
        self._month_picker.month_picked.connect(controller.pick_month)
        self._year_picker.previous_decade.connect(controller.previous_decade)
        self._year_picker.next_decade.connect(controller.next_decade)
        self._year_picker.year_picked.connect(controller.pick_year)

    def _event_callback(self, event_id: str) -> Optional[Callable]:
        if self._controller is None:
            return None
        event = self._controller.store.get(event_id)
        return event.on_click if event is not None else None

    @property
    def month_view(self) -> MonthView:
        return self._month_view

    def current_page(self) -> QWidget:
        return self._stack.currentWidget()

    def show_month(self, grid: MonthGrid, config: CalendarConfig):
        self._title_button.setText(f"{config.localization.get_month_name(grid.month)} {grid.year}")
        self._month_view.set_grid(grid, config)
        self._stack.setCurrentWidget(self._month_page)
        self.month_shown.emit(grid.year, grid.month)

    def show_month_picker(self, year: int, config: CalendarConfig):
        self._month_picker.set_year(year, config)
        self._stack.setCurrentWidget(self._month_picker)

    def show_year_picker(self, first_year: int):
        self._year_picker.set_decade(first_year)
        self._stack.setCurrentWidget(self._year_picker)

    def refresh_month(self, grid: MonthGrid):
        if self._month_view.grid is grid:
            self._month_view.refresh()
