"""Tests for suggestion scoring, ranking, collation and the dropdown machine."""

from __future__ import annotations

from typing import List

import pytest

from provider_probe.suggest.collation import (
    codepoint_collation_key,
    english_collation_key,
    get_collation,
)
from provider_probe.suggest.dropdown import (
    DropdownEvent,
    DropdownMachine,
    DropdownState,
    next_state,
)
from provider_probe.suggest.ranking import (
    highlight,
    rank_suggestions,
    score_suggestion,
    split_match,
)

# ── Scoring ──────────────────────────────────────────────────────────────


class TestScore:
    @pytest.mark.parametrize(
        "candidate, query, expected",
        [
            ("GPT-4", "gpt-4", 3),
            ("gpt-4o", "gpt", 2),
            ("claude-sonnet", "sonnet", 1),
            ("gemini", "claude", 0),
            ("anything", "", 0),
        ],
    )
    def test_examples(self, candidate, query, expected):
        assert score_suggestion(candidate, query) == expected


# ── Ranking ──────────────────────────────────────────────────────────────


class TestRank:
    def test_best_score_first(self):
        ranked = rank_suggestions(["b", "a", "ab"], "a")
        assert [c.value for c in ranked] == ["a", "ab", "b"]
        assert [c.score for c in ranked] == [3, 2, 0]

    def test_ties_follow_collation_not_input_order(self):
        ranked = rank_suggestions(["zeta", "Beta", "alpha"], "")
        assert [c.value for c in ranked] == ["alpha", "Beta", "zeta"]

    def test_injected_collation(self):
        ranked = rank_suggestions(["zeta", "Beta", "alpha"], "", codepoint_collation_key)
        assert [c.value for c in ranked] == ["Beta", "alpha", "zeta"]

    def test_keeps_every_candidate(self):
        assert len(rank_suggestions(["x", "y", "z"], "q")) == 3


class TestCollation:
    def test_lowercase_before_uppercase(self):
        assert sorted(["B", "a", "b", "A"], key=english_collation_key) == ["a", "A", "b", "B"]

    def test_punctuation_then_digits_then_letters(self):
        assert sorted(["b", "1", "-"], key=english_collation_key) == ["-", "1", "b"]

    def test_accents_are_secondary(self):
        assert sorted(["f", "é", "e"], key=english_collation_key) == ["e", "é", "f"]

    def test_prefix_sorts_first(self):
        assert sorted(["ab", "a"], key=english_collation_key) == ["a", "ab"]

    def test_lookup(self):
        assert get_collation("en-US") is english_collation_key
        assert get_collation("codepoint") is codepoint_collation_key
        with pytest.raises(KeyError):
            get_collation("klingon")


# ── Highlight ────────────────────────────────────────────────────────────


class TestHighlight:
    def test_split_first_case_insensitive_hit(self):
        assert split_match("Claude-Sonnet", "sonnet") == ("Claude-", "Sonnet", "")

    def test_split_uses_first_occurrence(self):
        assert split_match("aXaX", "x") == ("a", "X", "aX")

    def test_no_match(self):
        assert split_match("gemini", "gpt") is None
        assert split_match("gemini", "") is None

    def test_rich_text_keeps_candidate(self):
        text = highlight("gpt-4o", "4O")
        assert text.plain == "gpt-4o"
        assert any(span.style == "bold" for span in text.spans)

    def test_rich_text_without_match(self):
        text = highlight("gpt-4o", "zzz")
        assert text.plain == "gpt-4o"
        assert not text.spans


# ── Dropdown state machine ───────────────────────────────────────────────


class TestTransitions:
    @pytest.mark.parametrize(
        "event", [DropdownEvent.INPUT_CHANGED, DropdownEvent.FOCUS, DropdownEvent.TOGGLE]
    )
    def test_closed_opens(self, event):
        assert next_state(DropdownState.CLOSED, event) is DropdownState.OPEN

    @pytest.mark.parametrize(
        "event",
        [
            DropdownEvent.TOGGLE,
            DropdownEvent.SELECT,
            DropdownEvent.OUTSIDE_POINTER_DOWN,
            DropdownEvent.ESCAPE,
        ],
    )
    def test_open_closes(self, event):
        assert next_state(DropdownState.OPEN, event) is DropdownState.CLOSED

    def test_unlisted_pairs_keep_state(self):
        assert next_state(DropdownState.OPEN, DropdownEvent.FOCUS) is DropdownState.OPEN
        assert next_state(DropdownState.CLOSED, DropdownEvent.ESCAPE) is DropdownState.CLOSED


class _Recorder:
    """Collects machine callbacks in call order."""

    def __init__(self) -> None:
        self.events: List[str] = []
        self.committed: List[str] = []
        self.machine: DropdownMachine

    def on_commit(self, value: str) -> None:
        self.committed.append(value)
        self.events.append(f"commit:{self.machine.state.value}")

    def subscribe(self):
        self.events.append("subscribe")

        def release() -> None:
            self.events.append("release")

        return release

    def restore_focus(self) -> None:
        self.events.append(f"focus:{self.machine.state.value}")


def _machine(suggestions=("gpt-4o", "gpt-4", "claude-opus")) -> _Recorder:
    rec = _Recorder()
    rec.machine = DropdownMachine(
        rec.on_commit,
        suggestions,
        subscribe_dismiss=rec.subscribe,
        restore_focus=rec.restore_focus,
    )
    return rec


class TestDropdownMachine:
    def test_starts_closed(self):
        rec = _machine()
        assert rec.machine.state is DropdownState.CLOSED
        assert rec.machine.visible is False

    def test_typing_opens_and_ranks(self):
        rec = _machine()
        rec.machine.input_changed("gpt-4")
        assert rec.machine.is_open
        assert rec.machine.ranked[0].value == "gpt-4"
        assert rec.machine.query == "gpt-4"

    def test_visible_needs_candidates(self):
        rec = _machine(suggestions=())
        rec.machine.focus()
        assert rec.machine.is_open
        assert rec.machine.visible is False
        assert rec.events == []

    def test_toggle_twice(self):
        rec = _machine()
        rec.machine.toggle()
        assert rec.machine.visible
        rec.machine.toggle()
        assert rec.machine.state is DropdownState.CLOSED

    def test_select_commits_then_closes_then_focuses(self):
        rec = _machine()
        rec.machine.focus()
        rec.machine.select("claude-opus")
        assert rec.committed == ["claude-opus"]
        assert rec.events == ["subscribe", "commit:open", "release", "focus:closed"]
        assert rec.machine.query == "claude-opus"

    def test_outside_pointer_closes_without_commit(self):
        rec = _machine()
        rec.machine.input_changed("gpt")
        rec.machine.outside_pointer_down()
        assert rec.machine.state is DropdownState.CLOSED
        assert rec.committed == []
        assert rec.machine.query == "gpt"

    def test_escape_closes(self):
        rec = _machine()
        rec.machine.focus()
        rec.machine.escape()
        assert rec.machine.state is DropdownState.CLOSED
        assert rec.events == ["subscribe", "release"]

    def test_subscription_follows_visibility(self):
        rec = _machine()
        rec.machine.focus()
        assert rec.machine.subscribed
        rec.machine.set_suggestions([])
        assert not rec.machine.subscribed
        rec.machine.set_suggestions(["x"])
        assert rec.machine.subscribed
        assert rec.events == ["subscribe", "release", "subscribe"]

    def test_set_query_does_not_open(self):
        rec = _machine()
        rec.machine.set_query("claude")
        assert rec.machine.state is DropdownState.CLOSED
        assert rec.machine.ranked[0].value == "claude-opus"

    def test_close_releases(self):
        rec = _machine()
        rec.machine.toggle()
        rec.machine.close()
        assert rec.events == ["subscribe", "release"]
        assert not rec.machine.subscribed
