"""Shared constants and header builders for the test suite."""

from __future__ import annotations

import base64

BASE_URL = "https://api.20i.com"
USERNAME = "operator"
PASSWORD = "s3cret:with-colon"


def basic_auth(username: str = USERNAME, password: str = PASSWORD) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"
