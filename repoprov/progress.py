"""
Progress reporting utilities for repoprov.

Progress goes to stderr so stdout stays clean for data.
"""

import sys
from typing import Optional
from enum import Enum

from rich.console import Console


class LogLevel(Enum):
    """Log levels for progress messages."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    SUCCESS = 4


_STYLES = {
    LogLevel.DEBUG: ("  ", "dim"),
    LogLevel.INFO: ("", None),
    LogLevel.WARNING: ("⚠ ", "yellow"),
    LogLevel.ERROR: ("✗ ", "red"),
    LogLevel.SUCCESS: ("✓ ", "green"),
}


class ProgressReporter:
    """Handles progress reporting to stderr while keeping stdout clean for data."""

    def __init__(self, enabled: Optional[bool] = None, console: Optional[Console] = None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable progress. None = auto-detect
            console: Console to write to (stderr by default)
        """
        self.console = console or Console(stderr=True, highlight=False)
        if enabled is None:
            self.enabled = sys.stderr.isatty()
        else:
            self.enabled = enabled

    def __call__(self, message: str, force: bool = False, level: LogLevel = LogLevel.INFO):
        """Output a progress message if enabled (or forced)."""
        if not (force or self.enabled):
            return
        prefix, style = _STYLES[level]
        self.console.print(f"{prefix}{message}", style=style, markup=False)

    def error(self, message: str):
        """Always output errors."""
        self.console.print(f"ERROR: {message}", style="red", markup=False)

    def warning(self, message: str):
        self(message, level=LogLevel.WARNING)

    def success(self, message: str):
        self(message, level=LogLevel.SUCCESS)

    def status(self, message: str):
        """Spinner context for a long-running step; a no-op when disabled."""
        if self.enabled:
            return self.console.status(message)
        return _NullStatus()


class _NullStatus:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """Get a progress reporter."""
    return ProgressReporter(enabled=enabled)
