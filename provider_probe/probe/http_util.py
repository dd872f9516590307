"""Helpers shared by the HTTP probe client and the model catalogue."""

from __future__ import annotations

from typing import List

# Maximum characters of a response body quoted in error messages.
_ERROR_TAIL_CHARS = 180


def compact_error_tail(body: str) -> str:
    """Condense a response body into a short ``": ..."`` suffix.

    Returns an empty string for an empty body.
    """
    trimmed = body.strip()
    if not trimmed:
        return ""
    single_line = trimmed.replace("\n", " ")
    short = single_line[:_ERROR_TAIL_CHARS]
    if len(single_line) > _ERROR_TAIL_CHARS:
        short += "..."
    return f": {short}"


def describe_http_status(status: int, body: str, action: str = "Request") -> str:
    """User-facing explanation of a non-2xx response."""
    tail = compact_error_tail(body)
    if status in (401, 403):
        return f"Authentication failed, check the API key (HTTP {status}){tail}"
    if status in (404, 405):
        return (
            f"Endpoint not found, make sure the provider is OpenAI compatible "
            f"(HTTP {status}){tail}"
        )
    if status == 429:
        return f"Rate limited, try again later (HTTP 429){tail}"
    return f"{action} failed (HTTP {status}){tail}"


def join_url(base_url: str, path: str) -> str:
    """Append *path* to *base_url* without doubling a ``/v1`` segment."""
    base = base_url.strip().rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    if base.endswith("/v1") and (path == "/v1" or path.startswith("/v1/")):
        path = path[len("/v1") :]
    return f"{base}{path}"


def build_models_urls(base_url: str) -> List[str]:
    """Candidate ``models`` endpoints for a provider, most specific first."""
    normalized = base_url.strip().rstrip("/")
    if not normalized:
        return []
    if normalized.endswith("/models"):
        return [normalized]

    urls: List[str] = []
    if not normalized.endswith("/v1"):
        urls.append(f"{normalized}/v1/models")
    direct = f"{normalized}/models"
    if direct not in urls:
        urls.append(direct)
    return urls
