from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest

from tests.helpers import PASSWORD, USERNAME
from twentyi_gateway.api import create_app
from twentyi_gateway.core.config import GatewayConfig


@pytest.fixture
def config() -> GatewayConfig:
    """Fully configured gateway: combined key plus Basic-auth reference values."""
    return GatewayConfig(
        combined_key="combined-token",
        auth_username=USERNAME,
        auth_password=PASSWORD,
    )


@pytest.fixture
def bare_config() -> GatewayConfig:
    """Nothing configured at all."""
    return GatewayConfig()


@pytest.fixture
async def client(config: GatewayConfig) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(config)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://gateway") as ac:
        yield ac
