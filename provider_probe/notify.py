"""Notification contract between the probe core and the presentation layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    """Severity of a user-facing notification."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A rendered notification ready to be shown to the user."""

    level: NotificationLevel
    message: str
    description: Optional[str] = None


class Notifier(Protocol):
    """Anything that can show a notification to the user."""

    def notify(
        self,
        level: NotificationLevel,
        message: str,
        description: Optional[str] = None,
    ) -> None: ...


_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


class LoggingNotifier:
    """Notifier that writes notifications to a logger.

    Used by the CLI and whenever no interactive surface is attached.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def notify(
        self,
        level: NotificationLevel,
        message: str,
        description: Optional[str] = None,
    ) -> None:
        if description:
            self._log.log(_LOG_LEVELS[level], "%s (%s)", message, description)
        else:
            self._log.log(_LOG_LEVELS[level], "%s", message)
