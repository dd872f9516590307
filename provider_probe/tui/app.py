"""Provider Probe Textual TUI application.

Lists the providers of one application at a time. Probes run as Textual
workers through a :class:`ProbeOrchestrator` per application, so several
providers can be probed at once while the table shows which ones are
still in flight.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, Footer, Header, Label

from provider_probe.config.schema import ProbeSettings
from provider_probe.constants import APP_NAME, APP_VERSION, APPLICATION_IDS
from provider_probe.errors import ModelCatalogError
from provider_probe.health.store import CircuitBreakerStore
from provider_probe.probe.catalog import fetch_models
from provider_probe.probe.client import HttpProbeClient
from provider_probe.probe.inflight import InFlightSet
from provider_probe.probe.orchestrator import ProbeClient, ProbeOrchestrator
from provider_probe.suggest.collation import get_collation
from provider_probe.tui.notifier import ToastNotifier
from provider_probe.tui.pointer import PointerDownHub
from provider_probe.tui.widgets.model_suggest import ModelSuggest
from provider_probe.tui.widgets.provider_table import ProviderTable

logger = logging.getLogger(__name__)


class ProbeApp(PointerDownHub, App):
    """Textual TUI for on-demand provider probes."""

    TITLE = f"{APP_NAME} v{APP_VERSION}"

    CSS = """
    #model-row {
        height: auto;
        padding: 0 1;
    }
    #model-label {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("c", "check", "Check"),
        Binding("a", "next_application", "App"),
        Binding("m", "fetch_models", "Fetch Models"),
    ]

    def __init__(
        self,
        settings: ProbeSettings,
        *,
        application_id: Optional[str] = None,
        client: Optional[ProbeClient] = None,
        breakers: Optional[CircuitBreakerStore] = None,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._applications: List[str] = [
            app_id for app_id in APPLICATION_IDS if app_id in settings.applications
        ]
        self._application_id = application_id or (
            self._applications[0] if self._applications else APPLICATION_IDS[0]
        )
        self._owns_client = client is None
        self._client: ProbeClient = client or HttpProbeClient(settings)
        self._breakers = breakers or CircuitBreakerStore()
        self._notifier = ToastNotifier(self)
        self._orchestrators: Dict[str, ProbeOrchestrator] = {}
        self._chosen_models: Dict[Tuple[str, str], str] = {}
        self._model_provider: Optional[str] = None

    # ── Compose ─────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ProviderTable(id="provider-table")
        with Vertical(id="model-row"):
            yield Label("Model", id="model-label")
            yield ModelSuggest(
                on_change=self._on_model_change,
                placeholder="Model name",
                collation=get_collation(self._settings.suggest.collation),
                id="model-suggest",
            )
        yield Footer()

    async def on_mount(self) -> None:
        if self._owns_client and isinstance(self._client, HttpProbeClient):
            await self._client.connect()
        self._load_application()

    async def on_unmount(self) -> None:
        if self._owns_client and isinstance(self._client, HttpProbeClient):
            await self._client.close()

    # ── Orchestration ───────────────────────────────────────────

    def orchestrator(self, application_id: str) -> ProbeOrchestrator:
        """Return (creating on first use) the orchestrator of an application."""
        orch = self._orchestrators.get(application_id)
        if orch is None:
            orch = ProbeOrchestrator(
                application_id,
                self._client,
                self._breakers,
                self._notifier,
                locale=self._settings.locale,
                on_in_flight_change=lambda snap, app_id=application_id: self._on_in_flight(
                    app_id, snap
                ),
            )
            self._orchestrators[application_id] = orch
        return orch

    def _on_in_flight(self, application_id: str, snapshot: InFlightSet) -> None:
        if application_id == self._application_id:
            self.query_one(ProviderTable).set_checking(snapshot)

    async def _run_probe(self, application_id: str, provider_id: str) -> None:
        name = self._settings.display_name(application_id, provider_id)
        result = await self.orchestrator(application_id).begin_probe(provider_id, name)
        if application_id != self._application_id:
            return
        table = self.query_one(ProviderTable)
        table.set_result(provider_id, result)
        breaker = self._breakers.get(provider_id, application_id)
        table.set_breaker(provider_id, breaker.to_dict() if breaker else None)

    # ── Actions ─────────────────────────────────────────────────

    def action_check(self) -> None:
        provider_id = self.query_one(ProviderTable).selected_provider
        if provider_id is None:
            self.notify("No provider selected", severity="warning", timeout=3)
            return
        self.run_worker(
            self._run_probe(self._application_id, provider_id),
            exclusive=False,
            name=f"probe-{self._application_id}-{provider_id}",
        )

    def action_next_application(self) -> None:
        if len(self._applications) < 2:
            return
        idx = self._applications.index(self._application_id)
        self._application_id = self._applications[(idx + 1) % len(self._applications)]
        self._load_application()

    def action_fetch_models(self) -> None:
        provider_id = self.query_one(ProviderTable).selected_provider
        if provider_id is None:
            return
        self.run_worker(
            self._fetch_models(self._application_id, provider_id),
            exclusive=True,
            group="models",
            name=f"models-{provider_id}",
        )

    async def _fetch_models(self, application_id: str, provider_id: str) -> None:
        provider = self._settings.get_provider(application_id, provider_id)
        if provider is None:
            return
        try:
            listing = await fetch_models(
                provider.base_url,
                provider.api_key,
                headers=provider.headers,
            )
        except ModelCatalogError as exc:
            self.notify(str(exc), title="Fetch models failed", severity="error", timeout=8)
            return
        for warning in listing.warnings:
            logger.info("[%s/%s] %s", application_id, provider_id, warning)
        if self._model_provider == provider_id:
            self.query_one(ModelSuggest).set_suggestions(listing.model_ids)
        self.notify(f"{len(listing.models)} model(s) from {listing.resolved_url}", timeout=4)

    # ── Table / model picker wiring ─────────────────────────────

    def _load_application(self) -> None:
        app_cfg = self._settings.applications.get(self._application_id)
        providers = []
        if app_cfg is not None:
            providers = [
                (pid, self._settings.display_name(self._application_id, pid))
                for pid in app_cfg.providers
            ]
        table = self.query_one(ProviderTable)
        table.load(f"Providers · {self._application_id}", providers)
        orch = self.orchestrator(self._application_id)
        table.set_checking(orch.in_flight)
        for pid, _name in providers:
            breaker = self._breakers.get(pid, self._application_id)
            table.set_breaker(pid, breaker.to_dict() if breaker else None)
            table.set_model(pid, self._chosen_models.get((self._application_id, pid), ""))
        self._show_models_for(providers[0][0] if providers else None)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        key = event.row_key.value if event.row_key is not None else None
        self._show_models_for(key)

    def _show_models_for(self, provider_id: Optional[str]) -> None:
        self._model_provider = provider_id
        suggest = self.query_one(ModelSuggest)
        provider = (
            self._settings.get_provider(self._application_id, provider_id)
            if provider_id
            else None
        )
        suggest.set_suggestions(provider.models if provider else [])
        suggest.set_value(self._chosen_models.get((self._application_id, provider_id or ""), ""))

    def _on_model_change(self, value: str) -> None:
        if self._model_provider is None:
            return
        self._chosen_models[(self._application_id, self._model_provider)] = value
        self.query_one(ProviderTable).set_model(self._model_provider, value)
