"""
Provider Probe - on-demand health checks for upstream model providers.

Provider Probe runs one-shot liveness probes against configured providers,
classifies the outcome as operational, degraded or failed, and clears the
provider's circuit breaker when connectivity is proven.
"""

from provider_probe.constants import APP_NAME, APP_VERSION

__version__ = APP_VERSION
__app_name__ = APP_NAME

__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "__version__",
    "__app_name__",
]
