"""Which provider key and base URL a request uses.

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from agent_proxy.config import (
    ACCESS_CODE_PREFIX,
    API_VERSION_SUFFIX,
    DEFAULT_BASE_URL,
    Settings,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    api_key: str
    base_url: str


def parse_bearer_token(authorization: str | None) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    return (authorization or "").strip().replace("Bearer ", "").strip()


def is_access_code(token: str) -> bool:
    return token.startswith(ACCESS_CODE_PREFIX)


def resolve_api_key(token: str, server_api_key: str) -> str:
    """Use a raw provider key from the caller, else the server default."""
    if token and not is_access_code(token):
        return token
    return server_api_key


def normalize_base_url(base_url: str) -> str:
    """Ensure the URL ends with exactly one API version segment."""
    base_url = base_url.rstrip("/")
    if base_url.endswith(API_VERSION_SUFFIX):
        return base_url
    return f"{base_url}{API_VERSION_SUFFIX}"


def resolve_base_url(
    request_base_url: str | None,
    server_base_url: str | None,
) -> str:
    """Pick the provider base URL: request > server > provider default."""
    base_url = DEFAULT_BASE_URL
    if server_base_url:
        base_url = server_base_url
    if request_base_url and request_base_url.startswith(("http://", "https://")):
        base_url = request_base_url
    return normalize_base_url(base_url)


def resolve_credentials(
    token: str,
    request_base_url: str | None,
    settings: Settings,
) -> Credentials:
    base_url = resolve_base_url(request_base_url, settings.base_url)
    logger.debug("Resolved base URL %s", base_url)
    return Credentials(
        api_key=resolve_api_key(token, settings.openai_api_key),
        base_url=base_url,
    )
