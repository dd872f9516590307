"""On-demand provider probing.

Public API
----------
- :class:`ProbeOrchestrator`: Runs probes and coordinates breaker resets
- :class:`HttpProbeClient`: HTTP implementation of the probe client
- :class:`ProbeResult` / :class:`ProbeStatus`: Probe outcome
- :class:`InFlightSet`: Immutable set of providers being probed
- :func:`classify` / :func:`classify_error`: Outcome decision table
- :func:`fetch_models`: Model catalogue lookup
"""

from provider_probe.probe.catalog import ModelDescriptor, ModelListing, fetch_models
from provider_probe.probe.classify import ProbeDecision, classify, classify_error
from provider_probe.probe.client import HttpProbeClient
from provider_probe.probe.inflight import InFlightSet
from provider_probe.probe.models import ProbeResult, ProbeStatus, ProviderProbeKey
from provider_probe.probe.orchestrator import ProbeOrchestrator

__all__ = [
    "HttpProbeClient",
    "InFlightSet",
    "ModelDescriptor",
    "ModelListing",
    "ProbeDecision",
    "ProbeOrchestrator",
    "ProbeResult",
    "ProbeStatus",
    "ProviderProbeKey",
    "classify",
    "classify_error",
    "fetch_models",
]
