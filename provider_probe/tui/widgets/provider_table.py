"""Provider list with probe and circuit-breaker status.

Feed rows via :meth:`load`, then keep them current with
:meth:`set_checking`, :meth:`set_result` and :meth:`set_breaker`.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widget import Widget
from textual.widgets import DataTable, Label

from provider_probe.probe.inflight import InFlightSet
from provider_probe.probe.models import ProbeResult, ProbeStatus

logger = logging.getLogger(__name__)

_STATUS_DISPLAY = {
    ProbeStatus.OPERATIONAL: "[green]● operational[/green]",
    ProbeStatus.DEGRADED: "[yellow]◑ degraded[/yellow]",
    ProbeStatus.FAILED: "[red]✕ failed[/red]",
}

_CIRCUIT_DISPLAY = {
    "closed": "[green]CLOSED[/green]",
    "open": "[red]OPEN[/red]",
    "half-open": "[yellow]HALF-OPEN[/yellow]",
}

_CHECKING = "[cyan]… checking[/cyan]"
_UNKNOWN = "[dim]—[/dim]"


class ProviderTable(Widget):
    """Shows each provider of the active application and its last probe."""

    DEFAULT_CSS = """
    ProviderTable {
        height: auto;
        max-height: 20;
        border: round $accent;
        padding: 0 1;
    }
    #providers-title {
        text-style: bold;
        color: $primary;
    }
    #providers-table {
        height: auto;
        max-height: 16;
    }
    """

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._order: List[str] = []
        self._last_status: Dict[str, str] = {}
        self._title = "Providers"

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(f"[b]{self._title}[/b]", id="providers-title")
            yield DataTable(id="providers-table")

    def on_mount(self) -> None:
        self._ensure_columns()

    def _ensure_columns(self) -> DataTable:
        table = self.query_one("#providers-table", DataTable)
        if not table.columns:
            table.add_column("Provider", key="provider")
            table.add_column("Name", key="name")
            table.add_column("Status", key="status")
            table.add_column("Latency", key="latency")
            table.add_column("Breaker", key="breaker")
            table.add_column("Model", key="model")
            table.cursor_type = "row"
            table.zebra_stripes = True
        return table

    # ── Public API ──────────────────────────────────────────────

    def load(self, title: str, providers: Sequence[Tuple[str, str]]) -> None:
        """Replace all rows with ``(provider_id, display_name)`` pairs."""
        self._title = title
        self.query_one("#providers-title", Label).update(f"[b]{title}[/b]")
        table = self._ensure_columns()
        table.clear()
        self._order = []
        self._last_status = {}
        for provider_id, name in providers:
            table.add_row(provider_id, name, _UNKNOWN, _UNKNOWN, _UNKNOWN, "", key=provider_id)
            self._order.append(provider_id)

    @property
    def selected_provider(self) -> Optional[str]:
        """Provider id under the cursor, or ``None`` for an empty table."""
        if not self._order:
            return None
        row = self.query_one("#providers-table", DataTable).cursor_row
        if 0 <= row < len(self._order):
            return self._order[row]
        return None

    def set_checking(self, in_flight: InFlightSet) -> None:
        """Show the checking marker for every provider in *in_flight*."""
        for provider_id in self._order:
            if provider_id in in_flight:
                self._update(provider_id, "status", _CHECKING)
            else:
                self._update(provider_id, "status", self._last_status.get(provider_id, _UNKNOWN))

    def set_result(self, provider_id: str, result: Optional[ProbeResult]) -> None:
        """Record the outcome of a finished probe (``None`` for transport errors)."""
        if result is None:
            status = "[red]✕ error[/red]"
            latency = _UNKNOWN
        else:
            status = _STATUS_DISPLAY[result.status]
            latency = (
                f"{result.response_time_ms}ms" if result.response_time_ms is not None else _UNKNOWN
            )
        self._last_status[provider_id] = status
        self._update(provider_id, "status", status)
        self._update(provider_id, "latency", latency)

    def set_breaker(self, provider_id: str, snapshot: Optional[dict]) -> None:
        """Show a circuit breaker snapshot (``CircuitBreaker.to_dict()``)."""
        if snapshot is None:
            self._update(provider_id, "breaker", _CIRCUIT_DISPLAY["closed"])
            return
        state = snapshot.get("state", "closed")
        display = _CIRCUIT_DISPLAY.get(state, f"[dim]{state}[/dim]")
        failures = snapshot.get("consecutive_failures", 0)
        if failures:
            display += f" [dim]({failures})[/dim]"
        resets = snapshot.get("reset_count", 0)
        if resets:
            display += f" [dim]reset {resets}×[/dim]"
        self._update(provider_id, "breaker", display)

    def set_model(self, provider_id: str, model: str) -> None:
        self._update(provider_id, "model", model)

    # ── Internals ───────────────────────────────────────────────

    def _update(self, provider_id: str, column: str, value: str) -> None:
        if provider_id not in self._order:
            return
        try:
            self.query_one("#providers-table", DataTable).update_cell(provider_id, column, value)
        except Exception:
            logger.debug("Cannot update provider table cell", exc_info=True)
