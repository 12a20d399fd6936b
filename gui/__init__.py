"""
Kalgrid GUI Module

PySide6-based renderer and main window for the month calendar.
"""

from .main_window import MainWindow

__all__ = ['MainWindow']
