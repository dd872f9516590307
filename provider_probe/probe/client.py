"""HTTP probe client for configured providers.

Performs a single timed ``GET`` against the provider's probe endpoint and
returns a classified :class:`ProbeResult`. Connection-level problems
raise :class:`ProbeTransportError`; the caller decides how to report them.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional

import httpx

from provider_probe.config.schema import ProbeSettings, ProviderConfig
from provider_probe.errors import ProbeTransportError
from provider_probe.probe.http_util import describe_http_status, join_url
from provider_probe.probe.models import ProbeResult

logger = logging.getLogger(__name__)


class HttpProbeClient:
    """Async probe client backed by ``httpx.AsyncClient``.

    Parameters
    ----------
    settings:
        Validated configuration; providers are resolved from it per call.
    transport:
        Optional custom ``httpx`` transport (tests use ``MockTransport``).
    clock:
        Monotonic time source used to measure the round trip.
    """

    def __init__(
        self,
        settings: ProbeSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._clock = clock
        self._client: Optional[httpx.AsyncClient] = None

    # ── Lifecycle ────────────────────────────────────────────────

    async def connect(self) -> None:
        """Create the underlying ``httpx.AsyncClient``."""
        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=self._settings.probe.timeout_seconds,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Shut down the HTTP client gracefully."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpProbeClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            raise RuntimeError("HttpProbeClient is not connected, call connect() first")
        return self._client

    # ── Probe ────────────────────────────────────────────────────

    @staticmethod
    def _headers(provider: ProviderConfig) -> Dict[str, str]:
        headers = dict(provider.headers)
        if provider.api_key:
            headers.setdefault("Authorization", f"Bearer {provider.api_key}")
        return headers

    async def probe(self, application_id: str, provider_id: str) -> ProbeResult:
        """Probe one provider once. No retries."""
        provider = self._settings.get_provider(application_id, provider_id)
        if provider is None:
            raise ProbeTransportError(
                f"Provider is not configured for application '{application_id}'",
                provider_id,
            )

        client = self._ensure_client()
        probe_cfg = self._settings.probe
        url = join_url(provider.base_url, probe_cfg.probe_path)

        start = self._clock()
        try:
            resp = await client.get(url, headers=self._headers(provider))
        except httpx.TimeoutException:
            logger.info("[%s/%s] Probe timed out", application_id, provider_id)
            return ProbeResult.failed(
                "Request timed out, check the network or proxy configuration"
            )
        except httpx.HTTPError as exc:
            raise ProbeTransportError(f"Request failed: {exc}", provider_id, exc) from exc

        elapsed_ms = max(0, int((self._clock() - start) * 1000))
        if not resp.is_success:
            return ProbeResult.failed(
                describe_http_status(resp.status_code, resp.text, "Probe"),
                http_status=resp.status_code,
            )
        if elapsed_ms > probe_cfg.degraded_threshold_ms:
            return ProbeResult.degraded(elapsed_ms, http_status=resp.status_code)
        return ProbeResult.operational(elapsed_ms, http_status=resp.status_code)
