"""End-to-end tests for the HTTP gateway."""

from __future__ import annotations

import json

import httpx
import pytest
from respx import MockRouter

from tests.helpers import BASE_URL, basic_auth
from twentyi_gateway.api import create_app
from twentyi_gateway.core import dispatch as dispatch_module
from twentyi_gateway.core.config import GatewayConfig


async def test_list_packages_relays_upstream_body(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    """Test GET /packages makes one bearer-authenticated call and relays the body unchanged."""
    packages = [{"id": 42, "name": "example.com", "typeRef": "linux"}]
    route = respx_mock.get(f"{BASE_URL}/package").mock(return_value=httpx.Response(200, json=packages))

    response = await client.get("/packages", headers={"Authorization": basic_auth()})

    assert response.status_code == 200
    assert response.json() == packages
    assert route.call_count == 1
    assert route.calls.last.request.headers["Authorization"] == "Bearer combined-token"
    assert len(respx_mock.calls) == 1


async def test_create_database_forwards_body(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    route = respx_mock.post(f"{BASE_URL}/package/42/database").mock(
        return_value=httpx.Response(200, json={"result": "db_123"})
    )

    response = await client.post(
        "/package/42/database", json={"name": "mydb"}, headers={"Authorization": basic_auth()}
    )

    assert response.status_code == 200
    assert response.json() == {"result": "db_123"}
    assert route.call_count == 1
    assert json.loads(route.calls.last.request.content) == {"name": "mydb"}


async def test_create_database_upstream_failure(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.post(f"{BASE_URL}/package/42/database").mock(
        return_value=httpx.Response(500, json={"message": "Database quota exceeded"})
    )

    response = await client.post(
        "/package/42/database", json={"name": "mydb"}, headers={"Authorization": basic_auth()}
    )

    assert response.status_code == 500
    body = response.json()
    assert "Database quota exceeded" in body["error"]
    assert body["error_type"] == "UpstreamError"
    assert body["upstream_status"] == 500
    assert body["upstream_error"] == {"message": "Database quota exceeded"}


async def test_health_with_nothing_configured(bare_config: GatewayConfig) -> None:
    app = create_app(bare_config)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://gateway") as ac:
        response = await ac.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert "timestamp" in body
    assert body["auth_configured"] is False
    assert body["api_key_configured"] is False
    assert body["oauth_key_configured"] is False
    assert body["combined_key_configured"] is False


async def test_health_reports_booleans_not_values(client: httpx.AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["auth_configured"] is True
    assert body["combined_key_configured"] is True
    assert body["api_key_configured"] is False
    assert "combined-token" not in response.text


async def test_missing_auth_is_challenged(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    response = await client.get("/domains")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"].startswith("Basic")
    assert response.json()["error_type"] == "MissingCredentials"
    assert len(respx_mock.calls) == 0


async def test_wrong_password_is_challenged(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    response = await client.get("/domains", headers={"Authorization": basic_auth(password="wrong")})

    assert response.status_code == 401
    assert "WWW-Authenticate" in response.headers
    assert response.json()["error_type"] == "InvalidCredentials"
    assert len(respx_mock.calls) == 0


async def test_legacy_domain_route(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    route = respx_mock.get(f"{BASE_URL}/domain/example.com").mock(
        return_value=httpx.Response(200, json={"name": "example.com"})
    )

    response = await client.get("/20i/domain/example.com", headers={"Authorization": basic_auth()})

    assert response.status_code == 200
    assert response.json() == {"name": "example.com"}
    assert route.call_count == 1


async def test_invalid_json_body_is_400(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    response = await client.post(
        "/package/42/database",
        content=b"{broken",
        headers={"Authorization": basic_auth(), "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error_type"] == "ValidationError"
    assert len(respx_mock.calls) == 0


async def test_delete_relays_empty_response(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.delete(f"{BASE_URL}/package/42/email/info").mock(return_value=httpx.Response(204))

    response = await client.delete("/package/42/email/info", headers={"Authorization": basic_auth()})

    assert response.status_code == 204
    assert response.content == b""


async def test_upstream_timeout_is_json_500(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.get(f"{BASE_URL}/vps").mock(side_effect=httpx.ReadTimeout)

    response = await client.get("/vps", headers={"Authorization": basic_auth()})

    assert response.status_code == 500
    assert response.json()["error_type"] == "UpstreamTimeout"


async def test_unknown_route_returns_json(client: httpx.AsyncClient) -> None:
    response = await client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"


async def test_wrong_method_returns_json(client: httpx.AsyncClient) -> None:
    response = await client.put("/packages", headers={"Authorization": basic_auth()})

    assert response.status_code == 405
    assert "error" in response.json()


async def test_cors_preflight(client: httpx.AsyncClient) -> None:
    response = await client.options(
        "/packages",
        headers={"Origin": "https://dashboard.example.com", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


async def test_empty_success_body_stays_empty(client: httpx.AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.post(f"{BASE_URL}/vps/7/reboot").mock(return_value=httpx.Response(200))

    response = await client.post("/vps/7/reboot", headers={"Authorization": basic_auth()})

    assert response.status_code == 200
    assert response.content == b""


async def test_unexpected_exception_is_json_500(config: GatewayConfig, monkeypatch: pytest.MonkeyPatch) -> None:
    async def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(dispatch_module.twentyi, "call", explode)
    app = create_app(config)
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://gateway") as ac:
        response = await ac.get("/packages", headers={"Authorization": basic_auth()})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "error_type": "RuntimeError"}
    assert "boom" not in response.text
