"""20i hosting API client.

API docs: https://my.20i.com/reseller/api
Every call opens its own short-lived client: no pooling, no retries, no cache.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config import CREDENTIAL_SLOTS, GatewayConfig
from ..errors import ConfigurationError, UpstreamError, UpstreamTimeout, ValidationError
from ..models import HttpMethod, UpstreamRequest, UpstreamResponse

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 10.0


def select_credential(config: GatewayConfig) -> str:
    """Return the first non-empty credential slot: combined > oauth > api key."""
    for _, attr in CREDENTIAL_SLOTS:
        value = getattr(config, attr)
        if value:
            return value
    raise ConfigurationError(
        "no credential configured: set TWENTYI_COMBINED_KEY, TWENTYI_OAUTH_KEY or TWENTYI_API_KEY"
    )


def build_request(path: str, method: str = "GET", body: Any = None) -> UpstreamRequest:
    """Validate the pieces of an outbound call."""
    try:
        return UpstreamRequest(path=path, method=HttpMethod(str(method).upper()), body=body)
    except ValueError as exc:
        raise ValidationError(f"Invalid upstream request: {exc}") from None


def _decode_payload(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(status_code: int, request: UpstreamRequest, payload: Any) -> str:
    detail: Optional[str] = None
    if isinstance(payload, dict):
        for key in ("message", "error", "type"):
            if isinstance(payload.get(key), str):
                detail = payload[key]
                break
    elif isinstance(payload, str) and payload.strip():
        detail = payload.strip()[:500]
    base = f"20i API returned {status_code} for {request.method.value} {request.path}"
    return f"{base}: {detail}" if detail else base


async def call(
    config: GatewayConfig,
    path: str,
    method: str = "GET",
    body: Any = None,
) -> UpstreamResponse:
    """Issue one request to the 20i API and return its status and payload.

    Args:
        config: Gateway configuration holding the credential slots and base URL.
        path: Upstream path, starting with '/' (e.g. '/package/42/database').
        method: GET, POST or DELETE.
        body: JSON-serializable payload, sent only for POST and DELETE.

    Raises:
        ConfigurationError: no credential slot is populated (no request is made).
        UpstreamTimeout: the request exceeded the configured timeout.
        UpstreamError: transport failure or a non-2xx response.
    """
    request = build_request(path, method, body)
    credential = select_credential(config)

    headers = {
        "Authorization": f"Bearer {credential}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    kwargs: dict = {"headers": headers}
    if request.sends_body:
        kwargs["json"] = request.body

    url = f"{config.base_url}{request.path}"
    timeout = httpx.Timeout(config.timeout_seconds, connect=CONNECT_TIMEOUT_SECONDS)
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.request(request.method.value, url, **kwargs)
    except httpx.TimeoutException as exc:
        logger.warning("20i %s %s timed out: %s", request.method.value, request.path, exc)
        raise UpstreamTimeout(
            f"20i API timed out after {config.timeout_seconds:g}s for {request.method.value} {request.path}"
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning("20i %s %s failed: %s", request.method.value, request.path, exc)
        raise UpstreamError(f"20i API request failed: {exc}") from exc

    payload = _decode_payload(response)
    if not response.is_success:
        logger.warning("20i %s %s -> %d", request.method.value, request.path, response.status_code)
        raise UpstreamError(
            _error_message(response.status_code, request, payload),
            upstream_status=response.status_code,
            upstream_payload=payload,
        )

    logger.info("20i %s %s -> %d", request.method.value, request.path, response.status_code)
    return UpstreamResponse(status_code=response.status_code, payload=payload)
