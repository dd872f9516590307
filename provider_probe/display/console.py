"""Console output for the non-interactive CLI commands.

Color scheme:
- **Success**: bold bright_green checkmark.
- **Warning**: bold yellow half-circle.
- **Error**: bold red X, description dimmed on the next line.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from provider_probe.notify import LoggingNotifier, NotificationLevel
from provider_probe.probe.catalog import ModelListing

_LEVEL_STYLE = {
    NotificationLevel.SUCCESS: ("✓", "bold bright_green"),
    NotificationLevel.WARNING: ("◑", "bold yellow"),
    NotificationLevel.ERROR: ("✕", "bold red"),
}


class ConsoleNotifier:
    """Notifier printing one styled line per notification.

    Every notification is also written to the log file.
    """

    def __init__(self, console: Optional[Console] = None, file: Optional[TextIO] = None) -> None:
        self._console = console or Console(file=file or sys.stdout, highlight=False)
        self._log = LoggingNotifier()

    def notify(
        self,
        level: NotificationLevel,
        message: str,
        description: Optional[str] = None,
    ) -> None:
        self._log.notify(level, message, description)
        icon, style = _LEVEL_STYLE[level]
        line = Text(f"{icon} ", style=style)
        line.append(message)
        self._console.print(line)
        if description:
            self._console.print(Text(f"  {description}", style="dim"))


def print_model_listing(listing: ModelListing, console: Optional[Console] = None) -> None:
    """Render a fetched model list as a table."""
    console = console or Console(highlight=False)
    table = Table(title=f"Models ({listing.resolved_url}, {listing.elapsed_ms}ms)")
    table.add_column("Model", style="cyan")
    table.add_column("Owner", style="dim")
    for model in listing.models:
        table.add_row(model.id, model.owned_by or "—")
    console.print(table)
    for warning in listing.warnings:
        console.print(Text(f"! {warning}", style="yellow"))
