"""Probe notifications rendered as Textual toasts."""

from __future__ import annotations

from typing import Optional

from textual.app import App

from provider_probe.notify import NotificationLevel

_SEVERITY = {
    NotificationLevel.SUCCESS: "information",
    NotificationLevel.WARNING: "warning",
    NotificationLevel.ERROR: "error",
}

# Seconds each toast stays on screen
_TIMEOUT = {
    NotificationLevel.SUCCESS: 4.0,
    NotificationLevel.WARNING: 6.0,
    NotificationLevel.ERROR: 10.0,
}


class ToastNotifier:
    """Adapter from the probe :class:`Notifier` contract to ``App.notify``."""

    def __init__(self, app: App) -> None:
        self._app = app

    def notify(
        self,
        level: NotificationLevel,
        message: str,
        description: Optional[str] = None,
    ) -> None:
        if description:
            self._app.notify(
                description,
                title=message,
                severity=_SEVERITY[level],
                timeout=_TIMEOUT[level],
            )
        else:
            self._app.notify(message, severity=_SEVERITY[level], timeout=_TIMEOUT[level])
