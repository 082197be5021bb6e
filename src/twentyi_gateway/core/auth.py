"""HTTP Basic authentication for local routes."""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from typing import Optional

from .config import GatewayConfig
from .errors import (
    InvalidCredentials,
    MalformedCredentials,
    MissingCredentials,
    ServerMisconfigured,
)
from .models import BasicAuthPrincipal

logger = logging.getLogger(__name__)

SCHEME = "basic"


def decode_basic(header: Optional[str]) -> BasicAuthPrincipal:
    """Decode a ``Basic`` Authorization header into a principal.

    Raises:
        MissingCredentials: header absent or not the Basic scheme.
        MalformedCredentials: payload is not base64 ``username:password``.
    """
    if not header or not header.strip():
        raise MissingCredentials("Authentication required")

    scheme, _, encoded = header.strip().partition(" ")
    if scheme.lower() != SCHEME:
        raise MissingCredentials("Basic authentication required")

    encoded = encoded.strip()
    if not encoded:
        raise MalformedCredentials("Empty Basic credentials")
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise MalformedCredentials("Basic credentials are not valid base64") from None

    username, sep, password = decoded.partition(":")
    if not sep:
        raise MalformedCredentials("Basic credentials must be 'username:password'")
    return BasicAuthPrincipal(username=username, password=password)


def authenticate(header: Optional[str], config: GatewayConfig) -> BasicAuthPrincipal:
    """Validate an Authorization header against the configured username/password."""
    principal = decode_basic(header)

    if not config.auth_configured:
        logger.error("MCP_USERNAME and MCP_PASSWORD must both be set to serve authenticated routes")
        raise ServerMisconfigured("Server authentication is not configured")

    username_ok = secrets.compare_digest(
        principal.username.encode("utf-8"), config.auth_username.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        principal.password.encode("utf-8"), config.auth_password.encode("utf-8")
    )
    if not (username_ok and password_ok):
        logger.warning("Rejected Basic credentials")
        raise InvalidCredentials("Invalid username or password")
    return principal
