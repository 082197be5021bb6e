"""Pydantic data models, the shared request/response objects.

Both the HTTP gateway and the MCP server pass these models between the
authenticator, the route table and the upstream client.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HttpMethod(str, Enum):
    """Methods the 20i API is called with."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.DELETE})


class UpstreamRequest(BaseModel):
    """A single outbound call to the 20i API."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: HttpMethod = HttpMethod.GET
    body: Any = None

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"Upstream path must start with '/': {value!r}")
        return value

    @property
    def sends_body(self) -> bool:
        return self.method in BODY_METHODS and self.body is not None


class UpstreamResponse(BaseModel):
    """Upstream status and decoded payload, relayed verbatim."""

    status_code: int
    payload: Any = None


class BasicAuthPrincipal(BaseModel):
    """Username/password pair decoded from a Basic Authorization header."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)


class RouteSpec(BaseModel):
    """One row of the route table: a local endpoint and its upstream target."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Stable identifier, also used as the Starlette route name")
    method: HttpMethod
    local_path: str = Field(description="Starlette path template, e.g. /package/{id}")
    upstream_path: str = Field(description="20i path template filled from local path parameters")
    requires_auth: bool = True
    required_fields: tuple[str, ...] = Field(default=(), description="Body keys that must be present")

    @property
    def accepts_body(self) -> bool:
        return self.method in BODY_METHODS


class RouteResult(BaseModel):
    """Outcome of dispatching one route: what the HTTP layer should send back."""

    status_code: int
    payload: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_type is None
