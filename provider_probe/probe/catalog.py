"""Model catalogue lookup for OpenAI-compatible providers.

Feeds the model picker with the model ids a provider advertises on its
``models`` endpoint.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from provider_probe.constants import (
    MODELS_FETCH_TIMEOUT,
    MODELS_FETCH_TIMEOUT_MAX,
    MODELS_FETCH_TIMEOUT_MIN,
)
from provider_probe.errors import ModelCatalogError
from provider_probe.probe.http_util import build_models_urls, describe_http_status

logger = logging.getLogger(__name__)


class ModelDescriptor(BaseModel):
    """One model advertised by a provider."""

    id: str
    owned_by: Optional[str] = None
    created: Optional[int] = None


class ModelListing(BaseModel):
    """Result of :func:`fetch_models`."""

    models: List[ModelDescriptor] = Field(default_factory=list)
    resolved_url: str
    elapsed_ms: int = 0
    warnings: List[str] = Field(default_factory=list)

    @property
    def model_ids(self) -> List[str]:
        return [m.id for m in self.models]


class _ModelItem(BaseModel):
    id: Optional[str] = None
    owned_by: Optional[str] = None
    created: Optional[int] = None


class _ModelsPayload(BaseModel):
    data: List[_ModelItem] = Field(default_factory=list)


def parse_models_payload(payload: Any) -> List[ModelDescriptor]:
    """Extract unique, non-blank model ids sorted by id.

    The first occurrence of a duplicated id wins.
    """
    try:
        parsed = _ModelsPayload.model_validate(payload)
    except ValidationError as exc:
        raise ModelCatalogError(f"Failed to parse model list: {exc}") from exc

    deduped: Dict[str, ModelDescriptor] = {}
    for item in parsed.data:
        model_id = (item.id or "").strip()
        if not model_id or model_id in deduped:
            continue
        deduped[model_id] = ModelDescriptor(
            id=model_id, owned_by=item.owned_by, created=item.created
        )
    return [deduped[k] for k in sorted(deduped)]


def _clamp_timeout(timeout_secs: Optional[float]) -> float:
    value = MODELS_FETCH_TIMEOUT if timeout_secs is None else timeout_secs
    return float(min(max(value, MODELS_FETCH_TIMEOUT_MIN), MODELS_FETCH_TIMEOUT_MAX))


def _describe_request_error(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "Request timed out, check the network or proxy configuration"
    return f"Request failed: {exc}"


async def fetch_models(
    base_url: str,
    api_key: str,
    *,
    timeout_secs: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ModelListing:
    """Fetch the model list of a provider.

    Tries ``{base}/v1/models`` then ``{base}/models``; a 404/405 or a
    request error on a non-final URL falls through to the next one and
    is recorded in :attr:`ModelListing.warnings`.
    """
    base_url = base_url.strip().rstrip("/")
    if not base_url:
        raise ModelCatalogError("Base URL must not be empty")
    api_key = api_key.strip()
    if not api_key:
        raise ModelCatalogError("API key must not be empty")

    urls = build_models_urls(base_url)
    request_headers = {
        **(headers or {}),
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }
    warnings: List[str] = []
    last_error: Optional[str] = None
    start = time.monotonic()

    async with httpx.AsyncClient(timeout=_clamp_timeout(timeout_secs), transport=transport) as client:
        for index, url in enumerate(urls):
            is_last = index + 1 == len(urls)
            try:
                resp = await client.get(url, headers=request_headers)
            except httpx.HTTPError as exc:
                last_error = _describe_request_error(exc)
                if not is_last:
                    warnings.append(f"Request to {url} failed, tried the fallback URL")
                    continue
                break

            if resp.is_success:
                try:
                    payload = resp.json()
                except ValueError as exc:
                    raise ModelCatalogError(f"Models endpoint returned non-JSON: {exc}") from exc
                models = parse_models_payload(payload)
                elapsed_ms = int((time.monotonic() - start) * 1000)
                logger.info("Fetched %d model(s) from %s in %dms", len(models), url, elapsed_ms)
                return ModelListing(
                    models=models,
                    resolved_url=url,
                    elapsed_ms=elapsed_ms,
                    warnings=warnings,
                )

            if not is_last and resp.status_code in (404, 405):
                warnings.append(
                    f"{url} returned HTTP {resp.status_code}, tried the fallback URL"
                )
                continue
            raise ModelCatalogError(
                describe_http_status(resp.status_code, resp.text, "Fetching models")
            )

    if last_error is not None:
        raise ModelCatalogError(last_error)
    raise ModelCatalogError("Failed to fetch models")
