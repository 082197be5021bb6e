"""HTTP gateway to the 20i API.

Starlette application built from the route table, with Basic auth on every
proxied route and an unauthenticated health check.
Run: twentyi-gateway
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

import uvicorn
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from .core.config import GatewayConfig
from .core.dispatch import dispatch
from .core.errors import ConfigurationError
from .core.models import RouteResult, RouteSpec
from .core.routes import ROUTES

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _to_response(result: RouteResult) -> Response:
    # An empty upstream body stays empty
    if result.payload is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(result.payload, status_code=result.status_code, headers=result.headers)


def _proxy_endpoint(route: RouteSpec):
    async def endpoint(request: Request) -> Response:
        raw_body = await request.body() if route.accepts_body else b""
        result = await dispatch(
            route,
            request.path_params,
            request.headers.get("authorization"),
            raw_body,
            request.app.state.config,
        )
        return _to_response(result)

    endpoint.__name__ = route.name
    return endpoint


async def health(request: Request) -> JSONResponse:
    config: GatewayConfig = request.app.state.config
    return JSONResponse({
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "auth_configured": config.auth_configured,
        **config.configured_slots(),
    })


async def _http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        {"error": exc.detail, "error_type": "HTTPException"},
        status_code=exc.status_code,
        headers=exc.headers,
    )


async def _unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error", "error_type": type(exc).__name__}, status_code=500)


def create_app(config: GatewayConfig) -> Starlette:
    """Build the gateway application for the given configuration."""
    routes = [Route("/health", health, methods=["GET"], name="health")]
    for spec in ROUTES:
        routes.append(
            Route(spec.local_path, _proxy_endpoint(spec), methods=[spec.method.value], name=spec.name)
        )

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]),
        ],
        exception_handlers={HTTPException: _http_exception, Exception: _unhandled_exception},
    )
    app.state.config = config
    return app


def main():
    """Entry point for the CLI command."""
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper(), format=LOG_FORMAT)
    try:
        config = GatewayConfig.from_env()
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid configuration: {exc.message}") from None

    slot = config.active_slot()
    if slot:
        logger.info("Using 20i credential from %s", slot)
    else:
        logger.warning("No 20i credential configured; upstream calls will fail")
    if not config.auth_configured:
        logger.warning("MCP_USERNAME/MCP_PASSWORD not set; authenticated routes will return 500")

    logger.info("20i gateway listening on port %d (%d routes)", config.port, len(ROUTES))
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port, log_config=None)


if __name__ == "__main__":
    main()
