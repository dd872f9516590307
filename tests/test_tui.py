"""Textual pilot tests for the model picker widget and the probe app."""

from __future__ import annotations

from typing import List

import pytest
from textual.app import App, ComposeResult
from textual.widgets import DataTable, Input, Label

from provider_probe.config.loader import validate_settings
from provider_probe.health.circuit_breaker import CircuitState
from provider_probe.health.store import CircuitBreakerStore
from provider_probe.notify import NotificationLevel
from provider_probe.probe.models import ProbeResult
from provider_probe.tui.app import ProbeApp
from provider_probe.tui.notifier import ToastNotifier
from provider_probe.tui.pointer import PointerDownHub, is_within
from provider_probe.tui.widgets.model_suggest import ModelSuggest

_MODELS = ["gpt-4o", "gpt-4", "claude-opus"]


class _SuggestApp(PointerDownHub, App):
    def __init__(self) -> None:
        super().__init__()
        self.changes: List[str] = []
        self.committed: List[str] = []

    def compose(self) -> ComposeResult:
        yield Label("outside", id="outside")
        yield ModelSuggest(on_change=self.changes.append, suggestions=_MODELS, id="suggest")

    def on_model_suggest_committed(self, event: ModelSuggest.Committed) -> None:
        self.committed.append(event.value)


async def _open(pilot, suggest: ModelSuggest) -> None:
    suggest.query_one("#suggest-input", Input).focus()
    await pilot.pause()
    if not suggest.dropdown_visible:
        suggest.machine.focus()


# ── Pointer hub ──────────────────────────────────────────────────────────


class TestPointerHub:
    def test_subscribe_and_release(self):
        hub = PointerDownHub()
        seen: List[object] = []
        release = hub.subscribe_pointer_down(seen.append)
        hub.broadcast_pointer_down("w1")
        release()
        release()
        hub.broadcast_pointer_down("w2")
        assert seen == ["w1"]

    def test_is_within(self):
        class _Node:
            def __init__(self, parent=None):
                self.parent = parent

        root = _Node()
        child = _Node(root)
        assert is_within(child, root)
        assert not is_within(root, child)
        assert not is_within(None, root)


class TestToastNotifier:
    def test_severity_mapping(self):
        calls = []

        class _App:
            def notify(self, message, **kwargs):
                calls.append((message, kwargs))

        notifier = ToastNotifier(_App())
        notifier.notify(NotificationLevel.SUCCESS, "ok")
        notifier.notify(NotificationLevel.ERROR, "bad", "hint")
        assert calls[0][1]["severity"] == "information"
        assert calls[1][0] == "hint"
        assert calls[1][1]["title"] == "bad"
        assert calls[1][1]["severity"] == "error"


# ── Model picker ─────────────────────────────────────────────────────────


class TestModelSuggest:
    @pytest.mark.asyncio
    async def test_typing_opens_and_ranks(self):
        app = _SuggestApp()
        async with app.run_test() as pilot:
            suggest = app.query_one(ModelSuggest)
            await _open(pilot, suggest)
            await pilot.press("c", "l")
            await pilot.pause()
            assert suggest.value == "cl"
            assert suggest.dropdown_visible
            assert suggest.machine.ranked[0].value == "claude-opus"
            assert app.changes[-1] == "cl"

    @pytest.mark.asyncio
    async def test_select_commits_exact_text_and_closes(self):
        app = _SuggestApp()
        async with app.run_test() as pilot:
            suggest = app.query_one(ModelSuggest)
            await _open(pilot, suggest)
            suggest.machine.select("gpt-4")
            await pilot.pause()
            assert suggest.value == "gpt-4"
            assert not suggest.dropdown_visible
            assert app.changes[-1] == "gpt-4"
            assert app.committed == ["gpt-4"]
            assert suggest.query_one("#suggest-input", Input).has_focus

    @pytest.mark.asyncio
    async def test_escape_closes(self):
        app = _SuggestApp()
        async with app.run_test() as pilot:
            suggest = app.query_one(ModelSuggest)
            await _open(pilot, suggest)
            assert suggest.dropdown_visible
            await pilot.press("escape")
            await pilot.pause()
            assert not suggest.dropdown_visible

    @pytest.mark.asyncio
    async def test_outside_click_closes_without_changing_value(self):
        app = _SuggestApp()
        async with app.run_test() as pilot:
            suggest = app.query_one(ModelSuggest)
            suggest.set_value("gpt")
            await _open(pilot, suggest)
            assert suggest.machine.subscribed
            await pilot.click("#outside")
            await pilot.pause()
            assert not suggest.dropdown_visible
            assert not suggest.machine.subscribed
            assert suggest.value == "gpt"
            assert app.committed == []

    @pytest.mark.asyncio
    async def test_set_value_does_not_open_or_echo(self):
        app = _SuggestApp()
        async with app.run_test() as pilot:
            suggest = app.query_one(ModelSuggest)
            suggest.machine.close()
            suggest.set_value("claude")
            await pilot.pause()
            assert suggest.value == "claude"
            assert not suggest.dropdown_visible
            assert app.changes == []


# ── Probe app ────────────────────────────────────────────────────────────


class _FakeClient:
    def __init__(self, result: ProbeResult) -> None:
        self.result = result
        self.calls: List[tuple] = []

    async def probe(self, application_id: str, provider_id: str) -> ProbeResult:
        self.calls.append((application_id, provider_id))
        return self.result


def _app_settings():
    return validate_settings(
        {
            "applications": {
                "claude": {
                    "providers": {
                        "p1": {
                            "name": "Primary",
                            "base_url": "https://api.example.com",
                            "models": ["claude-opus-4", "claude-sonnet-4"],
                        }
                    }
                },
                "codex": {"providers": {"c1": {"base_url": "https://codex.example.com"}}},
            }
        }
    )


class TestProbeApp:
    @pytest.mark.asyncio
    async def test_check_probes_selected_provider_and_resets_breaker(self):
        client = _FakeClient(ProbeResult.operational(42))
        breakers = CircuitBreakerStore()
        breakers.breaker("p1", "claude").state = CircuitState.OPEN
        app = ProbeApp(_app_settings(), client=client, breakers=breakers)

        async with app.run_test() as pilot:
            app.query_one("#providers-table", DataTable).focus()
            await pilot.press("c")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert client.calls == [("claude", "p1")]
            assert not app.orchestrator("claude").is_checking("p1")
            assert breakers.get("p1", "claude").state is CircuitState.CLOSED
            cell = app.query_one("#providers-table", DataTable).get_cell("p1", "status")
            assert "operational" in str(cell)
            breaker_cell = app.query_one("#providers-table", DataTable).get_cell("p1", "breaker")
            assert "CLOSED" in str(breaker_cell)
            assert "reset 1" in str(breaker_cell)

    @pytest.mark.asyncio
    async def test_failed_probe_leaves_breaker_open(self):
        client = _FakeClient(ProbeResult.failed("HTTP 500"))
        breakers = CircuitBreakerStore()
        breakers.breaker("p1", "claude").state = CircuitState.OPEN
        app = ProbeApp(_app_settings(), client=client, breakers=breakers)

        async with app.run_test() as pilot:
            app.query_one("#providers-table", DataTable).focus()
            await pilot.press("c")
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert breakers.get("p1", "claude").state is CircuitState.OPEN

    @pytest.mark.asyncio
    async def test_model_picker_follows_provider(self):
        app = ProbeApp(_app_settings(), client=_FakeClient(ProbeResult.operational(1)))
        async with app.run_test() as pilot:
            await pilot.pause()
            suggest = app.query_one(ModelSuggest)
            suggest.set_suggestions(["claude-opus-4", "claude-sonnet-4"])
            suggest.machine.select("claude-sonnet-4")
            await pilot.pause()
            cell = app.query_one("#providers-table", DataTable).get_cell("p1", "model")
            assert str(cell) == "claude-sonnet-4"

    @pytest.mark.asyncio
    async def test_switch_application(self):
        app = ProbeApp(_app_settings(), client=_FakeClient(ProbeResult.operational(1)))
        async with app.run_test() as pilot:
            app.query_one("#providers-table", DataTable).focus()
            await pilot.press("a")
            await pilot.pause()
            table = app.query_one("#providers-table", DataTable)
            assert table.row_count == 1
            assert str(table.get_cell("c1", "provider")) == "c1"
