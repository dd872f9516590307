"""Custom exception classes for Provider Probe."""

from typing import Optional


class ProviderProbeError(Exception):
    """Base class for all custom exceptions in Provider Probe."""

    pass


class ConfigurationError(ProviderProbeError):
    """Raised when loading or validating the configuration file fails."""

    pass


class ProbeTransportError(ProviderProbeError):
    """
    Raised when a probe call could not complete at all,
    as opposed to completing with a ``failed`` verdict.
    """

    def __init__(
        self,
        message: str,
        provider_id: Optional[str] = None,
        orig_exc: Optional[Exception] = None,
    ):
        self.provider_id = provider_id
        self.orig_exc = orig_exc

        full_msg = message
        if provider_id:
            full_msg = f"{message} (provider: {provider_id})"
        if orig_exc:
            full_msg += f" (original error: {type(orig_exc).__name__})"
        super().__init__(full_msg)


class ModelCatalogError(ProviderProbeError):
    """Raised when the model list of a provider cannot be fetched or parsed."""

    pass
