"""User notification sink for discovery and launch outcomes.

Responsibilities:
- Define the severity levels used for user-visible messages.
- Provide a terminal notifier rendering messages with `typer` styling.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

import typer


class Severity(str, Enum):
    """Severity of one user-visible notification."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notifier(Protocol):
    """Protocol for host notification sinks."""

    def notify(self, message: str, severity: Severity) -> None:
        """Show one message to the user."""


_SEVERITY_COLORS = {
    Severity.INFO: None,
    Severity.WARNING: typer.colors.YELLOW,
    Severity.ERROR: typer.colors.RED,
}


class TerminalNotifier:
    """Print notifications to the terminal; warnings and errors go to stderr."""

    def __init__(self, title: str = "agentlocator") -> None:
        self._title = title

    def notify(self, message: str, severity: Severity) -> None:
        """Print one styled notification line."""

        typer.secho(
            f"[{self._title}] {message}",
            fg=_SEVERITY_COLORS[severity],
            err=severity is not Severity.INFO,
        )
