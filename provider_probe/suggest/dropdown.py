"""Open/closed state machine behind the model suggestion dropdown.

Transitions::

    CLOSED ──(input changed | focus | toggle)──► OPEN
    OPEN ──(toggle | select | outside pointer | escape)──► CLOSED

The machine does not own the text value. It is told about every query
change, reports commits through ``on_commit`` and keeps the ranked list
current. While the dropdown is *visible* (open with at least one ranked
candidate) it holds a subscription for dismissal events, acquired on
becoming visible and released on becoming hidden.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from provider_probe.suggest.collation import Collation, english_collation_key
from provider_probe.suggest.ranking import ScoredCandidate, rank_suggestions

logger = logging.getLogger(__name__)


class DropdownState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class DropdownEvent(str, Enum):
    INPUT_CHANGED = "input_changed"
    FOCUS = "focus"
    TOGGLE = "toggle"
    SELECT = "select"
    OUTSIDE_POINTER_DOWN = "outside_pointer_down"
    ESCAPE = "escape"


# (state, event) → next state; pairs not listed leave the state unchanged
_TRANSITIONS: Dict[Tuple[DropdownState, DropdownEvent], DropdownState] = {
    (DropdownState.CLOSED, DropdownEvent.INPUT_CHANGED): DropdownState.OPEN,
    (DropdownState.CLOSED, DropdownEvent.FOCUS): DropdownState.OPEN,
    (DropdownState.CLOSED, DropdownEvent.TOGGLE): DropdownState.OPEN,
    (DropdownState.OPEN, DropdownEvent.TOGGLE): DropdownState.CLOSED,
    (DropdownState.OPEN, DropdownEvent.SELECT): DropdownState.CLOSED,
    (DropdownState.OPEN, DropdownEvent.OUTSIDE_POINTER_DOWN): DropdownState.CLOSED,
    (DropdownState.OPEN, DropdownEvent.ESCAPE): DropdownState.CLOSED,
    (DropdownState.CLOSED, DropdownEvent.SELECT): DropdownState.CLOSED,
}


def next_state(current: DropdownState, event: DropdownEvent) -> DropdownState:
    """Pure transition function."""
    return _TRANSITIONS.get((current, event), current)


Unsubscribe = Callable[[], None]


class DropdownMachine:
    """Dropdown state plus the ranked candidate list.

    Parameters
    ----------
    on_commit:
        Called with the selected candidate's exact text.
    suggestions:
        Initial candidate list.
    query:
        Initial text value (owned by the caller).
    collation:
        Tie-break strategy for equal scores.
    subscribe_dismiss:
        Called when the dropdown becomes visible; returns the callable
        that releases the subscription when it is hidden again.
    restore_focus:
        Called after a selection has closed the dropdown.
    """

    def __init__(
        self,
        on_commit: Callable[[str], None],
        suggestions: Sequence[str] = (),
        query: str = "",
        *,
        collation: Collation = english_collation_key,
        subscribe_dismiss: Optional[Callable[[], Unsubscribe]] = None,
        restore_focus: Optional[Callable[[], None]] = None,
    ) -> None:
        self._on_commit = on_commit
        self._collation = collation
        self._subscribe_dismiss = subscribe_dismiss
        self._restore_focus = restore_focus

        self._state = DropdownState.CLOSED
        self._suggestions: List[str] = list(suggestions)
        self._query = query
        self._ranked: List[ScoredCandidate] = self._rank()
        self._unsubscribe: Optional[Unsubscribe] = None

    # ── Read-only view ──────────────────────────────────────────

    @property
    def state(self) -> DropdownState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is DropdownState.OPEN

    @property
    def ranked(self) -> List[ScoredCandidate]:
        return list(self._ranked)

    @property
    def query(self) -> str:
        return self._query

    @property
    def visible(self) -> bool:
        """Open and at least one candidate to show."""
        return self._state is DropdownState.OPEN and len(self._ranked) > 0

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    # ── Data changes ────────────────────────────────────────────

    def set_suggestions(self, suggestions: Sequence[str]) -> None:
        self._suggestions = list(suggestions)
        self._ranked = self._rank()
        self._sync_subscription()

    def set_query(self, query: str) -> None:
        """Re-rank for an externally changed value without opening."""
        self._query = query
        self._ranked = self._rank()
        self._sync_subscription()

    # ── UI events ───────────────────────────────────────────────

    def input_changed(self, text: str) -> None:
        self._query = text
        self._ranked = self._rank()
        self._dispatch(DropdownEvent.INPUT_CHANGED)

    def focus(self) -> None:
        self._dispatch(DropdownEvent.FOCUS)

    def toggle(self) -> None:
        self._dispatch(DropdownEvent.TOGGLE)

    def outside_pointer_down(self) -> None:
        self._dispatch(DropdownEvent.OUTSIDE_POINTER_DOWN)

    def escape(self) -> None:
        self._dispatch(DropdownEvent.ESCAPE)

    def select(self, value: str) -> None:
        """Commit *value*, then close, then hand focus back to the input."""
        self._on_commit(value)
        self._query = value
        self._ranked = self._rank()
        self._dispatch(DropdownEvent.SELECT)
        if self._restore_focus is not None:
            self._restore_focus()

    def close(self) -> None:
        """Close and drop any subscription, e.g. when the widget unmounts."""
        self._state = DropdownState.CLOSED
        self._sync_subscription()

    # ── Internals ───────────────────────────────────────────────

    def _rank(self) -> List[ScoredCandidate]:
        if not self._suggestions:
            return []
        return rank_suggestions(self._suggestions, self._query, self._collation)

    def _dispatch(self, event: DropdownEvent) -> None:
        prev = self._state
        self._state = next_state(prev, event)
        if prev is not self._state:
            logger.debug("Dropdown %s → %s (%s)", prev.value, self._state.value, event.value)
        self._sync_subscription()

    def _sync_subscription(self) -> None:
        if self.visible and self._unsubscribe is None:
            if self._subscribe_dismiss is not None:
                self._unsubscribe = self._subscribe_dismiss()
        elif not self.visible and self._unsubscribe is not None:
            release, self._unsubscribe = self._unsubscribe, None
            release()
