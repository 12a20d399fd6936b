"""
Debug trace output for Kalgrid.

Traces are timestamped lines on stderr, switched on by the --debug flag.
"""

import sys
from datetime import datetime


_enabled: bool = False


def set_debug(enabled: bool) -> None:
    """Enable or disable debug traces."""
    global _enabled
    _enabled = enabled


def is_debug_enabled() -> bool:
    return _enabled


def debug_print(tag: str, message: str) -> None:
    if not _enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {tag}: {message}", file=sys.stderr)
