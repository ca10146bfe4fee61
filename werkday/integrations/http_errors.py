"""Translate httpx responses and transport failures into UpstreamError."""

from typing import Any

import httpx

from werkday.common.errors import UpstreamError
from werkday.common.payload import safe_dict, safe_list, safe_str


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        return safe_dict(response.json())
    except ValueError:
        return {}


def raise_for_upstream(response: httpx.Response, service: str) -> None:
    """
    Raise UpstreamError for non-2xx responses.

    The upstream `message` (or first `errorMessages` entry) wins over the
    generic `"{service} API error: {status}"` text.
    """
    if response.is_success:
        return
    body = _error_body(response)
    messages = safe_list(body.get("errorMessages"))
    message = safe_str(body.get("message")) or (safe_str(messages[0]) if messages else "")
    raise UpstreamError(message or f"{service} API error: {response.status_code}", response.status_code)


def decode_json(response: httpx.Response, service: str) -> Any:
    raise_for_upstream(response, service)
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError(f"{service} API returned invalid JSON", response.status_code) from exc
