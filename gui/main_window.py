"""
Main Window for Kalgrid.

Hosts the calendar widget, a small toolbar and the status bar, and wires
them to a CalendarController.
"""

from datetime import date
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QToolBar, QStatusBar, QFileDialog, QMessageBox
)
from PySide6.QtGui import QAction, QKeySequence, QShortcut

from backend.config import CalendarConfig
from backend.controller import CalendarController, ViewState
from .widgets.calendar_widget import CalendarWidget


class MainWindow(QMainWindow):
    """
    Main application window.

    Contains:
    - Toolbar with Today and Import actions
    - The month calendar with its month and year pickers
    - Status bar with the number of events
    """

    def __init__(self, config: CalendarConfig, ics_files: Optional[list[Path]] = None, parent=None):
        super().__init__(parent)
        self.config = config

        self._calendar_widget = CalendarWidget()
        self.controller = CalendarController(renderer=self._calendar_widget.renderer, config=config)
        self._calendar_widget.bind(self.controller)
        self._calendar_widget.event_clicked.connect(self._on_event_clicked)

        self._setup_window()
        self._setup_toolbar()
        self._setup_shortcuts()
        self._setup_statusbar()

        for path in ics_files or []:
            self.import_ics_file(path)

    def _setup_window(self):
        self.setWindowTitle("Kalgrid")
        self.setMinimumSize(640, 480)
        self.resize(1000, 760)
        self.setCentralWidget(self._calendar_widget)

    def _setup_toolbar(self):
        toolbar = QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        today_action = QAction("Today", self)
        today_action.triggered.connect(self.controller.go_today)
        toolbar.addAction(today_action)

        import_action = QAction("Import .ics", self)
        import_action.triggered.connect(self._on_import_clicked)
        toolbar.addAction(import_action)

    def _setup_shortcuts(self):
        prev_shortcut = QShortcut(QKeySequence("Left"), self)
        prev_shortcut.activated.connect(self._on_previous)
        next_shortcut = QShortcut(QKeySequence("Right"), self)
        next_shortcut.activated.connect(self._on_next)

    def _setup_statusbar(self):
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)
        self._update_status()

    def _update_status(self):
        self._statusbar.showMessage(f"{len(self.controller.store)} events")

    def _on_previous(self):
        if self.controller.state is ViewState.MONTH_VIEW:
            self.controller.previous_month()

    def _on_next(self):
        if self.controller.state is ViewState.MONTH_VIEW:
            self.controller.next_month()

    def _on_event_clicked(self, event_id: str):
        event = self.controller.store.get(event_id)
        if event is not None:
            self._statusbar.showMessage(
                f"{event.title}: {event.start:%Y-%m-%d %H:%M} - {event.finish:%Y-%m-%d %H:%M}"
            )

    def _on_import_clicked(self):
        filename, _ = QFileDialog.getOpenFileName(
            self, "Import calendar", str(Path.home()), "iCalendar files (*.ics)"
        )
        if filename:
            self.import_ics_file(Path(filename))

    def import_ics_file(self, path: Path) -> int:
        """Import events from an .ics file; returns how many were added."""
        try:
            added = self.controller.import_ics_file(path)
        except (OSError, ValueError) as e:
            QMessageBox.warning(self, "Import failed", f"Could not import {path}:\n{e}")
            return 0
        self._update_status()
        return added

    def go_to(self, d: date):
        self.controller.go_to_date(d)
