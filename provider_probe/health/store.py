"""In-process registry of circuit breakers keyed by provider and application."""

from __future__ import annotations

from typing import Dict, Optional

from provider_probe.health.circuit_breaker import CircuitBreaker
from provider_probe.probe.models import ProviderProbeKey


class CircuitBreakerStore:
    """Owns one :class:`CircuitBreaker` per :class:`ProviderProbeKey`.

    Breakers are created lazily, CLOSED, on first access.
    """

    def __init__(self) -> None:
        self._breakers: Dict[ProviderProbeKey, CircuitBreaker] = {}

    @staticmethod
    def _key(provider_id: str, application_id: str) -> ProviderProbeKey:
        return ProviderProbeKey(application_id=application_id, provider_id=provider_id)

    def breaker(self, provider_id: str, application_id: str) -> CircuitBreaker:
        """Return the breaker for a provider, creating it if needed."""
        key = self._key(provider_id, application_id)
        cb = self._breakers.get(key)
        if cb is None:
            cb = CircuitBreaker(f"{application_id}/{provider_id}")
            self._breakers[key] = cb
        return cb

    def get(self, provider_id: str, application_id: str) -> Optional[CircuitBreaker]:
        """Return an existing breaker, or ``None``."""
        return self._breakers.get(self._key(provider_id, application_id))

    def reset(self, provider_id: str, application_id: str) -> None:
        """Clear the failure state of one provider's breaker.

        A provider seen for the first time gets a CLOSED breaker that
        records the reset.
        """
        self.breaker(provider_id, application_id).reset()

    def snapshot(self) -> Dict[ProviderProbeKey, dict]:
        """Serialisable view of every known breaker."""
        return {key: cb.to_dict() for key, cb in self._breakers.items()}
