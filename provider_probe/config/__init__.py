"""Configuration loading and validation."""

from provider_probe.config.loader import find_config_file, load_settings, validate_settings
from provider_probe.config.schema import (
    ApplicationConfig,
    ProbeSettings,
    ProviderConfig,
)

__all__ = [
    "ApplicationConfig",
    "ProbeSettings",
    "ProviderConfig",
    "find_config_file",
    "load_settings",
    "validate_settings",
]
