"""Configuration file loading and validation.

Loads a YAML configuration file, expands ``${ENV_VAR}`` placeholders,
and validates against Pydantic models defined in :mod:`schema`.

The public API is :func:`load_settings` which returns a validated
:class:`ProbeSettings`.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from provider_probe.config.env import expand_env_vars
from provider_probe.config.schema import ProbeSettings
from provider_probe.display.logging_config import secret_redaction_filter
from provider_probe.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Recognised config file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})

# Config file search order (first match wins)
_CONFIG_SEARCH_ORDER = ("config.yaml", "config.yml")

CONFIG_ENV_VAR = "PROVIDER_PROBE_CONFIG"


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML config file from *cfg_fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported config file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except Exception as exc:
        raise ConfigurationError(f"Error reading configuration file: {cfg_fpath}\n  {exc}") from exc

    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            "Top-level configuration content must be a YAML mapping (dictionary)."
        )
    return raw_data


def _format_validation_errors(exc: ValidationError) -> str:
    """Format Pydantic validation errors into a readable multi-line string."""
    lines: List[str] = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        lines.append(f"  • {loc}: {err['msg']}")
    return "\n".join(lines)


def _register_secrets(settings: ProbeSettings) -> None:
    """Hand every resolved API key to the log redaction filter."""
    for app in settings.applications.values():
        for provider in app.providers.values():
            secret_redaction_filter.register(provider.api_key)


def validate_settings(raw_data: Dict[str, Any]) -> ProbeSettings:
    """Expand env placeholders in *raw_data* and validate it."""
    expanded = expand_env_vars(raw_data)
    try:
        settings = ProbeSettings.model_validate(expanded)
    except ValidationError as exc:
        raise ConfigurationError(
            "Configuration validation failed:\n" + _format_validation_errors(exc)
        ) from exc
    _register_secrets(settings)
    return settings


def load_settings(cfg_fpath: str) -> ProbeSettings:
    """Load, expand and validate the configuration file at *cfg_fpath*."""
    logger.info("Loading configuration from %s", cfg_fpath)
    settings = validate_settings(_read_config_file(cfg_fpath))
    provider_count = sum(len(app.providers) for app in settings.applications.values())
    logger.info(
        "Configuration loaded: %d application(s), %d provider(s)",
        len(settings.applications),
        provider_count,
    )
    return settings


def find_config_file(explicit: Optional[str] = None) -> str:
    """Resolve the config path: explicit flag, then env var, then CWD.

    Falls back to ``CWD/config.yaml`` if nothing exists (loader will error).
    """
    if explicit:
        return os.path.abspath(explicit)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return os.path.abspath(from_env)
    for name in _CONFIG_SEARCH_ORDER:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return os.path.join(os.getcwd(), "config.yaml")
