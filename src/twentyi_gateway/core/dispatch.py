"""Generic route handler: authenticate, build the upstream call, map failures.

``dispatch`` is independent of the HTTP framework: it takes the pieces of an
inbound request and returns a ``RouteResult``. Every ``GatewayError`` is
turned into a result here, so each route's failure mapping can be tested
without a server.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from .auth import authenticate
from .clients import twentyi
from .config import GatewayConfig
from .errors import ConfigurationError, GatewayError, ValidationError
from .models import RouteResult, RouteSpec
from .routes import fill_upstream_path

logger = logging.getLogger(__name__)


def parse_body(route: RouteSpec, raw_body: bytes) -> Any:
    """Decode the JSON body of a write route and check its required fields."""
    if not route.accepts_body:
        return None

    body = None
    if raw_body and raw_body.strip():
        try:
            body = json.loads(raw_body)
        except ValueError:
            raise ValidationError("Request body must be valid JSON") from None

    if route.required_fields:
        if not isinstance(body, dict):
            raise ValidationError(
                f"Request body must be a JSON object with: {', '.join(route.required_fields)}"
            )
        missing = [f for f in route.required_fields if body.get(f) in (None, "")]
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    return body


def error_result(exc: GatewayError) -> RouteResult:
    return RouteResult(
        status_code=exc.status_code,
        payload=exc.to_payload(),
        headers=exc.headers(),
        error_type=exc.error_type,
    )


async def dispatch(
    route: RouteSpec,
    path_params: Mapping[str, str],
    authorization: Optional[str],
    raw_body: bytes,
    config: GatewayConfig,
) -> RouteResult:
    """Run one route end to end. Never raises a ``GatewayError``."""
    try:
        if route.requires_auth:
            authenticate(authorization, config)
        upstream_path = fill_upstream_path(route, dict(path_params))
        body = parse_body(route, raw_body)
        response = await twentyi.call(config, upstream_path, route.method.value, body)
    except ConfigurationError as exc:
        logger.error("%s: %s", route.name, exc.message)
        return error_result(exc)
    except GatewayError as exc:
        logger.warning("%s failed with %s: %s", route.name, exc.error_type, exc.message)
        return error_result(exc)

    return RouteResult(status_code=response.status_code, payload=response.payload)
