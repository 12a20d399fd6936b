#!/usr/bin/env python3
"""
Kalgrid - A PySide6 month calendar with stacked multi-day events.

This is the main entry point for the application.
"""

import sys
import argparse
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from backend.config import CalendarConfig, configure
from backend.debug import set_debug
from backend.errors import ConfigurationError
from gui.main_window import MainWindow


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Kalgrid - A month calendar for iCalendar files"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "--ics",
        type=Path,
        action="append",
        default=[],
        help="iCalendar file to show (can be repeated)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    return parser.parse_args(argv)


def load_config(config_path):
    """Explicit config files must exist; the default one is optional."""
    if config_path is not None:
        return CalendarConfig.load(config_path)
    default_path = CalendarConfig.get_default_config_path()
    if default_path.exists():
        return CalendarConfig.load(default_path)
    return configure()


def main():
    """Main entry point."""
    args = parse_args()
    set_debug(args.debug)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("\nExample configuration:")
        print("""
[General]
first_day_of_week = 1
timezone = "Europe/Amsterdam"

[Layout]
event_offset = 5
event_height = 20

[Localization]
week_day_names = "Sun Mon Tue Wed Thu Fri Sat"
""")
        sys.exit(1)
    except (ConfigurationError, ValueError) as e:
        print(f"Error loading configuration: {e}")
        sys.exit(1)

    if args.debug:
        print(f"Loaded configuration from: {args.config or CalendarConfig.get_default_config_path()}")

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Kalgrid")
    app.setApplicationVersion("0.1")
    app.setStyle("Fusion")

    window = MainWindow(config, args.ics)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
