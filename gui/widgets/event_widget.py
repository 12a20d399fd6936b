"""
Event Widget for displaying placed event segments.

One widget per PlacedEvent. Continuation segments (an event wrapping onto
a later week) are drawn lighter than the first segment.
"""

from typing import Callable, Optional

from PySide6.QtWidgets import QWidget, QLabel, QHBoxLayout, QFrame
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QMouseEvent

from backend.config import ColorsConfig
from backend.event_placer import PlacedEvent, SegmentKind


def get_contrasting_text_color(bg_color: str) -> str:
    """Calculate whether black or white text contrasts better with the background."""
    color = bg_color.lstrip('#')
    if len(color) == 3:
        color = ''.join([c*2 for c in color])

    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
    except (ValueError, IndexError):
        return "#000000"

    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255

    return "#000000" if luminance > 0.5 else "#ffffff"


def lighten_color(hex_color: str, factor: float = 0.3) -> str:
    """Lighten a hex color by the given factor."""
    color = hex_color.lstrip('#')
    if len(color) == 3:
        color = ''.join([c*2 for c in color])

    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
    except (ValueError, IndexError):
        return hex_color

    r = int(min(255, r + (255 - r) * factor))
    g = int(min(255, g + (255 - g) * factor))
    b = int(min(255, b + (255 - b) * factor))

    return f"#{r:02x}{g:02x}{b:02x}"


class EventWidget(QFrame):
    """
    Widget representing one placed segment of an event.

    Clicking emits `clicked` with the event id and calls the event's
    on_click callback, if it has one, with the same id.
    """

    clicked = Signal(str)

    def __init__(
        self,
        placed: PlacedEvent,
        colors: Optional[ColorsConfig] = None,
        on_click: Optional[Callable[[str], None]] = None,
        parent: QWidget = None
    ):
        super().__init__(parent)
        self.placed = placed
        self._colors = colors or ColorsConfig()
        self._on_click = on_click

        self._setup_ui()
        self._apply_style()

    @property
    def event_id(self) -> str:
        return self.placed.event_id

    def _setup_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 0, 4, 0)
        layout.setSpacing(0)

        self._title_label = QLabel(self.placed.label)
        self._title_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        layout.addWidget(self._title_label)

        self.setToolTip(self.placed.label)
        self.setCursor(Qt.PointingHandCursor)

    def _apply_style(self) -> None:
        background = self._colors.event_background
        if self.placed.kind == SegmentKind.REPEAT:
            background = lighten_color(background, 0.4)
        text = get_contrasting_text_color(background)
        self.setStyleSheet(
            f"EventWidget {{ background-color: {background}; border-radius: 3px; }}"
            f" QLabel {{ color: {text}; background: transparent; }}"
        )

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.event_id)
            if self._on_click:
                self._on_click(self.event_id)
        super().mousePressEvent(event)
