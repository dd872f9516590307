"""Circuit breaker record of a single upstream provider.

The breaker itself is owned by the request path; this side only needs
to read its state and clear it. A manual probe that reaches the
provider calls :meth:`CircuitBreaker.reset`, which returns the breaker
to CLOSED from any state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half-open"


@dataclass
class CircuitBreaker:
    """Breaker of one ``application/provider`` pair."""

    name: str
    state: CircuitState = CircuitState.CLOSED
    consecutive_failures: int = 0
    reset_count: int = 0

    def reset(self) -> None:
        """Operator reset: close the breaker and forget past failures."""
        prev = self.state
        self.state = CircuitState.CLOSED
        self.consecutive_failures = 0
        self.reset_count += 1
        if prev is CircuitState.CLOSED:
            logger.debug("[%s] Breaker reset while already CLOSED", self.name)
        else:
            logger.info("[%s] Breaker %s → CLOSED (operator reset)", self.name, prev.name)

    def to_dict(self) -> dict:
        """Snapshot rendered by the provider table."""
        return {
            "state": self.state.value,
            "consecutive_failures": self.consecutive_failures,
            "reset_count": self.reset_count,
        }
