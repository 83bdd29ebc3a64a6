"""Console output for the dataviz CLI and application notifications.

The module-level helpers print one styled line each (emoji prefix, color,
stderr for errors). Notifier sits on top of them: every notification is logged
through the package logger and, unless quiet, echoed with the matching helper,
so user-facing messages and the JSON log never drift apart.
"""

from __future__ import annotations

from collections import deque
from enum import Enum

import typer

from ..core.logging_config import get_logger

logger = get_logger(__name__)

HISTORY_SIZE = 100


class OutputColor(str, Enum):
    """Valid color options for plain text output."""

    WHITE = "WHITE"
    CYAN = "CYAN"
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def success(message: str, *, prefix: bool = True) -> None:
    """Display a success message in green with checkmark emoji.

    Args:
        message: The success message to display
        prefix: Whether to include the checkmark emoji prefix (default: True)

    Example:
        success("Chart written to chart.png")
        # Output: ✅ Chart written to chart.png
    """
    formatted = f"✅ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.GREEN)


def error(message: str, *, prefix: bool = True, err: bool = True) -> None:
    """Display an error message in red with cross emoji.

    Args:
        message: The error message to display
        prefix: Whether to include the cross emoji prefix (default: True)
        err: Whether to write to stderr instead of stdout (default: True)
    """
    formatted = f"❌ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.RED, err=err)


def info(message: str, *, prefix: bool = True) -> None:
    """Display an informational message in cyan with info emoji."""
    formatted = f"ℹ️  {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.CYAN)


def warning(message: str, *, prefix: bool = True) -> None:
    """Display a warning message in yellow with warning emoji."""
    formatted = f"⚠️  {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.YELLOW)


def plain(message: str, *, color: OutputColor | None = None) -> None:
    """Display a plain message without emoji prefix.

    Example:
        plain("Technology    42", color=OutputColor.WHITE)
    """
    if color:
        typer.secho(message, fg=getattr(typer.colors, color.value))
    else:
        typer.echo(message)


def data(message: str, *, prefix: bool = True) -> None:
    """Display a data message in cyan with chart emoji.

    Example:
        data("Data preview:")
        # Output: 📊 Data preview:
    """
    formatted = f"📊 {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.CYAN)


_DISPLAY = {
    NotificationLevel.SUCCESS: success,
    NotificationLevel.INFO: info,
    NotificationLevel.WARNING: warning,
    NotificationLevel.ERROR: error,
}


class Notifier:
    """Show application notifications on the console and record them in the log.

    Only the most recent ``history_size`` notifications are kept. With
    ``quiet=True`` notifications are only logged, which is how the
    non-interactive commands and tests use it.
    """

    def __init__(self, *, quiet: bool = False, history_size: int = HISTORY_SIZE):
        self.quiet = quiet
        self.history: deque[tuple[NotificationLevel, str]] = deque(maxlen=history_size)

    def notify(self, message: str, level: NotificationLevel | str = NotificationLevel.INFO) -> None:
        level = NotificationLevel(level)
        self.history.append((level, message))
        if level is NotificationLevel.ERROR:
            logger.error(message, extra={"notification": level.value})
        elif level is NotificationLevel.WARNING:
            logger.warning(message, extra={"notification": level.value})
        else:
            logger.info(message, extra={"notification": level.value})
        if not self.quiet:
            _DISPLAY[level](message)

    def success(self, message: str) -> None:
        self.notify(message, NotificationLevel.SUCCESS)

    def info(self, message: str) -> None:
        self.notify(message, NotificationLevel.INFO)

    def warning(self, message: str) -> None:
        self.notify(message, NotificationLevel.WARNING)

    def error(self, message: str) -> None:
        self.notify(message, NotificationLevel.ERROR)
