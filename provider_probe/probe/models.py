"""Pydantic models for probe targets and outcomes."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ProbeStatus(str, Enum):
    """Tri-state health verdict of a single probe."""

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    FAILED = "failed"


class ProviderProbeKey(BaseModel):
    """Identifies one probe target. Used only as a lookup key."""

    model_config = {"frozen": True}

    application_id: str
    provider_id: str = Field(min_length=1)


class ProbeResult(BaseModel):
    """Outcome of one completed probe.

    ``response_time_ms`` is required for operational and degraded results,
    ``message`` for failed ones.
    """

    model_config = {"frozen": True}

    status: ProbeStatus
    response_time_ms: Optional[int] = Field(default=None, ge=0)
    message: Optional[str] = None
    http_status: Optional[int] = None
    model_used: Optional[str] = None
    tested_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _check_fields_for_status(self) -> "ProbeResult":
        if self.status is ProbeStatus.FAILED:
            if self.message is None:
                raise ValueError("failed results must carry a message")
        elif self.response_time_ms is None:
            raise ValueError(f"{self.status.value} results must carry response_time_ms")
        return self

    @property
    def ok(self) -> bool:
        """Whether the provider answered (operational or degraded)."""
        return self.status is not ProbeStatus.FAILED

    @classmethod
    def operational(cls, response_time_ms: int, **extra: object) -> "ProbeResult":
        return cls(status=ProbeStatus.OPERATIONAL, response_time_ms=response_time_ms, **extra)

    @classmethod
    def degraded(cls, response_time_ms: int, **extra: object) -> "ProbeResult":
        return cls(status=ProbeStatus.DEGRADED, response_time_ms=response_time_ms, **extra)

    @classmethod
    def failed(cls, message: str, **extra: object) -> "ProbeResult":
        return cls(status=ProbeStatus.FAILED, message=message, **extra)
