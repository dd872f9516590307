"""Circuit breaker state for upstream providers.

Public API
----------
- :class:`CircuitBreaker`: Per-provider circuit breaker
- :class:`CircuitState`: Circuit breaker state enum
- :class:`CircuitBreakerStore`: Breakers keyed by provider and application
"""

from provider_probe.health.circuit_breaker import CircuitBreaker, CircuitState
from provider_probe.health.store import CircuitBreakerStore

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerStore",
    "CircuitState",
]
