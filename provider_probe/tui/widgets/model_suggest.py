"""Model name input with a ranked suggestion dropdown.

Typing, focusing the input or pressing the toggle opens the dropdown.
Picking a suggestion commits its text, closes the dropdown and returns
focus to the input. Escape or a click anywhere outside the widget closes
it without touching the value.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Input, OptionList
from textual.widgets.option_list import Option

from provider_probe.suggest.collation import Collation, english_collation_key
from provider_probe.suggest.dropdown import DropdownMachine, Unsubscribe
from provider_probe.suggest.ranking import SCORE_NONE, highlight
from provider_probe.tui.pointer import is_within

logger = logging.getLogger(__name__)


class ModelSuggest(Widget):
    """Text input offering ranked model names.

    Parameters
    ----------
    value:
        Initial text of the input.
    on_change:
        Called with the new text on every edit and on every selection.
    suggestions:
        Candidate model names.
    """

    DEFAULT_CSS = """
    ModelSuggest {
        height: auto;
    }
    ModelSuggest #suggest-row {
        height: auto;
    }
    ModelSuggest #suggest-input {
        width: 1fr;
    }
    ModelSuggest #suggest-toggle {
        width: 5;
        min-width: 5;
    }
    ModelSuggest #suggest-list {
        display: none;
        max-height: 10;
        border: round $accent;
    }
    ModelSuggest #suggest-list.-visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
        Binding("down", "cursor_down", "Next", show=False),
        Binding("up", "cursor_up", "Previous", show=False),
    ]

    class Committed(Message):
        """Posted after a suggestion was picked."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(
        self,
        value: str = "",
        on_change: Optional[Callable[[str], None]] = None,
        suggestions: Sequence[str] = (),
        *,
        placeholder: str = "",
        collation: Collation = english_collation_key,
        **kwargs: object,
    ) -> None:
        super().__init__(**kwargs)
        self._initial_value = value
        self._on_change = on_change
        self._placeholder = placeholder
        self._dismiss_armed = False
        self._skip_next_focus = False
        self._machine = DropdownMachine(
            self._commit,
            suggestions,
            value,
            collation=collation,
            subscribe_dismiss=self._subscribe_dismiss,
            restore_focus=self._restore_focus,
        )

    def compose(self) -> ComposeResult:
        with Horizontal(id="suggest-row"):
            yield Input(
                value=self._initial_value,
                placeholder=self._placeholder,
                id="suggest-input",
            )
            yield Button("▾", id="suggest-toggle")
        yield OptionList(id="suggest-list")

    def on_mount(self) -> None:
        self.query_one("#suggest-toggle", Button).can_focus = False
        self.query_one("#suggest-list", OptionList).can_focus = False
        self._render_dropdown()

    def on_unmount(self) -> None:
        self._machine.close()

    # ── Public API ──────────────────────────────────────────────

    @property
    def machine(self) -> DropdownMachine:
        return self._machine

    @property
    def value(self) -> str:
        return self.query_one("#suggest-input", Input).value

    @property
    def dropdown_visible(self) -> bool:
        return self._machine.visible

    def set_suggestions(self, suggestions: Sequence[str]) -> None:
        """Replace the candidate list and re-rank against the current text."""
        self._machine.set_suggestions(suggestions)
        self._render_dropdown()

    def set_value(self, value: str) -> None:
        """Set the text programmatically without opening the dropdown."""
        input_widget = self.query_one("#suggest-input", Input)
        with input_widget.prevent(Input.Changed):
            input_widget.value = value
        self._machine.set_query(value)
        self._render_dropdown()

    # ── Events ──────────────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if self._on_change is not None:
            self._on_change(event.value)
        self._machine.input_changed(event.value)
        self._render_dropdown()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if not self._machine.visible:
            return
        option_list = self.query_one("#suggest-list", OptionList)
        if option_list.highlighted is None:
            return
        event.stop()
        self._select_index(option_list.highlighted)

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        if getattr(event, "widget", None) is not self.query_one("#suggest-input", Input):
            return
        if self._skip_next_focus:
            self._skip_next_focus = False
            return
        self._machine.focus()
        self._render_dropdown()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "suggest-toggle":
            return
        event.stop()
        self._machine.toggle()
        self._render_dropdown()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self._select_index(event.option_index)

    # ── Actions ─────────────────────────────────────────────────

    def action_dismiss(self) -> None:
        if self._dismiss_armed:
            self._machine.escape()
            self._render_dropdown()

    def action_cursor_down(self) -> None:
        if self._machine.visible:
            self.query_one("#suggest-list", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        if self._machine.visible:
            self.query_one("#suggest-list", OptionList).action_cursor_up()

    # ── Dropdown plumbing ───────────────────────────────────────

    def _select_index(self, index: int) -> None:
        ranked = self._machine.ranked
        if 0 <= index < len(ranked):
            self._machine.select(ranked[index].value)
            self._render_dropdown()

    def _commit(self, value: str) -> None:
        input_widget = self.query_one("#suggest-input", Input)
        with input_widget.prevent(Input.Changed):
            input_widget.value = value
        if self._on_change is not None:
            self._on_change(value)
        self.post_message(self.Committed(value))

    def _restore_focus(self) -> None:
        input_widget = self.query_one("#suggest-input", Input)
        if not input_widget.has_focus:
            self._skip_next_focus = True
            input_widget.focus()

    def _subscribe_dismiss(self) -> Unsubscribe:
        self._dismiss_armed = True
        subscribe = getattr(self.app, "subscribe_pointer_down", None)
        release_pointer = subscribe(self._on_app_pointer_down) if subscribe else None

        def release() -> None:
            self._dismiss_armed = False
            if release_pointer is not None:
                release_pointer()

        return release

    def _on_app_pointer_down(self, widget: object) -> None:
        if is_within(widget, self):
            return
        self._machine.outside_pointer_down()
        self._render_dropdown()

    def _render_dropdown(self) -> None:
        if not self.is_mounted:
            return
        ranked = self._machine.ranked
        option_list = self.query_one("#suggest-list", OptionList)
        option_list.clear_options()
        options: List[Option] = []
        for candidate in ranked:
            prompt = highlight(candidate.value, self._machine.query)
            if candidate.score == SCORE_NONE:
                prompt.stylize("dim")
            options.append(Option(prompt))
        option_list.add_options(options)
        option_list.set_class(self._machine.visible, "-visible")
        self.query_one("#suggest-toggle", Button).display = len(ranked) > 0
