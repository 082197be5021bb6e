"""Gateway configuration, resolved once from the environment at startup.

The resulting ``GatewayConfig`` is passed explicitly to the authenticator,
the upstream client and the MCP tools; nothing reads ``os.environ`` after
startup.
"""

from __future__ import annotations

import math
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.20i.com"
DEFAULT_PORT = 3000
DEFAULT_TIMEOUT_SECONDS = 30.0

# Credential slots in precedence order: (env var, config attribute)
CREDENTIAL_SLOTS: tuple[tuple[str, str], ...] = (
    ("TWENTYI_COMBINED_KEY", "combined_key"),
    ("TWENTYI_OAUTH_KEY", "oauth_key"),
    ("TWENTYI_API_KEY", "api_key"),
)


class GatewayConfig(BaseModel):
    """Immutable runtime configuration."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field("", repr=False)
    oauth_key: str = Field("", repr=False)
    combined_key: str = Field("", repr=False)
    auth_username: str = Field("", repr=False)
    auth_password: str = Field("", repr=False)
    port: int = DEFAULT_PORT
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GatewayConfig":
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("TWENTYI_API_KEY", "").strip(),
            oauth_key=env.get("TWENTYI_OAUTH_KEY", "").strip(),
            combined_key=env.get("TWENTYI_COMBINED_KEY", "").strip(),
            auth_username=env.get("MCP_USERNAME", ""),
            auth_password=env.get("MCP_PASSWORD", ""),
            port=_parse_number(env, "PORT", DEFAULT_PORT, int),
            base_url=(env.get("TWENTYI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=_parse_number(env, "TWENTYI_TIMEOUT", DEFAULT_TIMEOUT_SECONDS, float),
        )

    @property
    def auth_configured(self) -> bool:
        return bool(self.auth_username) and bool(self.auth_password)

    def active_slot(self) -> Optional[str]:
        """Env var name of the credential slot that wins precedence, if any."""
        for env_name, attr in CREDENTIAL_SLOTS:
            if getattr(self, attr):
                return env_name
        return None

    def configured_slots(self) -> dict[str, bool]:
        """Which credential slots hold a value. Never exposes the values."""
        return {
            "api_key_configured": bool(self.api_key),
            "oauth_key_configured": bool(self.oauth_key),
            "combined_key_configured": bool(self.combined_key),
        }


def _parse_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {raw!r}")
    return value
