"""Pydantic configuration models for Provider Probe.

Defines the validated config structure using the versioned v1 format.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from provider_probe.constants import (
    APPLICATION_IDS,
    DEFAULT_DEGRADED_THRESHOLD_MS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROBE_PATH,
    DEFAULT_PROBE_TIMEOUT,
)

# ── Sections ─────────────────────────────────────────────────────────────


class LoggingConfig(BaseModel):
    """File logging options."""

    level: str = Field(default=DEFAULT_LOG_LEVEL.lower(), description="debug | info | warning")


class ProbeConfig(BaseModel):
    """Probe client behaviour shared by every provider."""

    timeout_seconds: float = Field(
        default=DEFAULT_PROBE_TIMEOUT,
        gt=0,
        description="Upper bound for a single probe round trip in seconds.",
    )
    degraded_threshold_ms: int = Field(
        default=DEFAULT_DEGRADED_THRESHOLD_MS,
        ge=0,
        description="Round trips slower than this are reported as degraded.",
    )
    probe_path: str = Field(default=DEFAULT_PROBE_PATH, min_length=1)

    @field_validator("probe_path")
    @classmethod
    def _leading_slash(cls, v: str) -> str:
        v = v.strip()
        return v if v.startswith("/") else f"/{v}"


class SuggestConfig(BaseModel):
    """Model picker options."""

    collation: Literal["en-US", "codepoint"] = "en-US"


# ── Providers ────────────────────────────────────────────────────────────


class ProviderConfig(BaseModel):
    """One upstream provider of an application."""

    name: str = Field(default="", description="Display name used in notifications.")
    base_url: str = Field(..., min_length=1, description="Provider API root URL.")
    api_key: str = Field(default="", description="Bearer token (supports ${ENV_VAR}).")
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra HTTP headers. Supports ${ENV_VAR}.",
    )
    models: List[str] = Field(
        default_factory=list,
        description="Known model names offered by the model picker.",
    )

    @field_validator("base_url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL '{v}' must start with http:// or https://")
        return v

    @field_validator("api_key")
    @classmethod
    def _strip_key(cls, v: str) -> str:
        return v.strip()


class ApplicationConfig(BaseModel):
    """Providers configured for one application."""

    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)


# ── Top level ────────────────────────────────────────────────────────────


class ProbeSettings(BaseModel):
    """Root of the validated configuration file."""

    version: Literal["1"] = "1"
    locale: str = "en"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    suggest: SuggestConfig = Field(default_factory=SuggestConfig)
    applications: Dict[str, ApplicationConfig] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, v: object) -> object:
        return str(v) if isinstance(v, int) else v

    @field_validator("applications")
    @classmethod
    def _known_applications(
        cls, v: Dict[str, ApplicationConfig]
    ) -> Dict[str, ApplicationConfig]:
        unknown = sorted(set(v) - set(APPLICATION_IDS))
        if unknown:
            raise ValueError(
                f"Unknown application(s) {unknown}; expected one of {list(APPLICATION_IDS)}"
            )
        return v

    def get_provider(self, application_id: str, provider_id: str) -> Optional[ProviderConfig]:
        """Look up a provider, or ``None`` if it is not configured."""
        app = self.applications.get(application_id)
        if app is None:
            return None
        return app.providers.get(provider_id)

    def display_name(self, application_id: str, provider_id: str) -> str:
        """Configured display name, falling back to the provider id."""
        provider = self.get_provider(application_id, provider_id)
        if provider is None or not provider.name:
            return provider_id
        return provider.name
