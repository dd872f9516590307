"""App-wide pointer-down broadcasting.

Widgets that must react to clicks *outside* themselves (e.g. to dismiss a
dropdown) subscribe while they need it and release the subscription
afterwards. Mouse-down events bubble from the widget under the pointer up
to the app, where :class:`PointerDownHub` fans them out.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from textual import events

logger = logging.getLogger(__name__)

PointerListener = Callable[[Optional[Any]], None]


class PointerDownHub:
    """Mixin for :class:`textual.app.App` subclasses."""

    _pointer_listeners: List[PointerListener]

    def subscribe_pointer_down(self, listener: PointerListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it."""
        if not hasattr(self, "_pointer_listeners"):
            self._pointer_listeners = []
        self._pointer_listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._pointer_listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def broadcast_pointer_down(self, widget: Optional[Any]) -> None:
        """Tell every listener the pointer went down over *widget*."""
        for listener in list(getattr(self, "_pointer_listeners", ())):
            try:
                listener(widget)
            except Exception:
                logger.debug("Pointer-down listener error", exc_info=True)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self.broadcast_pointer_down(getattr(event, "widget", None))


def is_within(widget: Optional[Any], container: Any) -> bool:
    """Whether *widget* is *container* or one of its descendants."""
    node = widget
    while node is not None:
        if node is container:
            return True
        node = getattr(node, "parent", None)
    return False
