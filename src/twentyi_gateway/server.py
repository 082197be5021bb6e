"""20i MCP Server.

FastMCP server exposing read-only 20i tools over stdio.
Run: twentyi-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .core.clients import twentyi
from .core.config import GatewayConfig
from .core.errors import ConfigurationError
from .core.routes import fill_upstream_path, find_route

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)


def _count(payload) -> int | None:
    if isinstance(payload, (list, dict)):
        return len(payload)
    return None


async def list_domains(config: GatewayConfig) -> dict:
    response = await twentyi.call(config, find_route("list_domains").upstream_path)
    count = _count(response.payload)
    return {
        "domains": response.payload,
        "count": count,
        "summary": f"{count} domain(s) in the 20i account" if count is not None else "Domain list retrieved",
    }


async def get_domain_info(config: GatewayConfig, domain: str) -> dict:
    path = fill_upstream_path(find_route("get_domain"), {"domain": domain})
    response = await twentyi.call(config, path)
    return {
        "domain": domain,
        "info": response.payload,
        "summary": f"Details for {domain}",
    }


async def list_packages(config: GatewayConfig) -> dict:
    response = await twentyi.call(config, find_route("list_packages").upstream_path)
    count = _count(response.payload)
    return {
        "packages": response.payload,
        "count": count,
        "summary": f"{count} hosting package(s)" if count is not None else "Package list retrieved",
    }


def create_server(config: GatewayConfig) -> FastMCP:
    """Build the MCP server with its tools bound to ``config``."""

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[None]:
        logging.basicConfig(
            level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
        slot = config.active_slot()
        if slot:
            logger.info("20i MCP server using credential from %s", slot)
        else:
            logger.warning("No 20i credential configured; every tool call will fail")
        yield

    mcp = FastMCP(
        "20i",
        instructions="Inspect the domains and hosting packages in a 20i reseller account.",
        lifespan=lifespan,
    )

    @mcp.tool(name="list_domains", annotations=READ_ONLY)
    async def list_domains_tool() -> dict:
        """List all domains in your 20i account."""
        return await list_domains(config)

    @mcp.tool(name="get_domain_info", annotations=READ_ONLY)
    async def get_domain_info_tool(domain: str) -> dict:
        """Get detailed information about a specific domain.

        Args:
            domain: The domain name to get info for (e.g., 'example.com').
        """
        return await get_domain_info(config, domain)

    @mcp.tool(name="list_packages", annotations=READ_ONLY)
    async def list_packages_tool() -> dict:
        """List all hosting packages."""
        return await list_packages(config)

    return mcp


def main():
    """Entry point for the CLI command."""
    try:
        config = GatewayConfig.from_env()
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid configuration: {exc.message}") from None
    create_server(config).run()


if __name__ == "__main__":
    main()
