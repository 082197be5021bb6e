"""Gateway error hierarchy.

Every failure the gateway can report is a ``GatewayError`` carrying the HTTP
status it maps to and a JSON body. Route handlers never see anything else.
"""

from __future__ import annotations

from typing import Any, Optional

CHALLENGE_HEADER = "WWW-Authenticate"
CHALLENGE_VALUE = 'Basic realm="20i gateway", charset="UTF-8"'


class GatewayError(Exception):
    """Base class for all gateway failures."""

    status_code = 500
    challenge = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def error_type(self) -> str:
        return type(self).__name__

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "error_type": self.error_type}

    def headers(self) -> dict[str, str]:
        if self.challenge:
            return {CHALLENGE_HEADER: CHALLENGE_VALUE}
        return {}


class ConfigurationError(GatewayError):
    """Operator-side misconfiguration (missing credential, bad env value)."""


class ServerMisconfigured(ConfigurationError):
    """Basic-auth reference values are not configured on the server."""

    challenge = True


class AuthError(GatewayError):
    """Client-side authentication failure."""

    status_code = 401
    challenge = True


class MissingCredentials(AuthError):
    pass


class MalformedCredentials(AuthError):
    pass


class InvalidCredentials(AuthError):
    pass


class ValidationError(GatewayError):
    """The inbound request is missing or has unusable fields."""

    status_code = 400


class UpstreamError(GatewayError):
    """The 20i API failed or answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        upstream_payload: Any = None,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_payload = upstream_payload

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["upstream_status"] = self.upstream_status
        if self.upstream_payload is not None:
            payload["upstream_error"] = self.upstream_payload
        return payload


class UpstreamTimeout(UpstreamError):
    pass
