"""Access control for the agent endpoint.

A bearer token is either a raw provider key or an access code carrying
ACCESS_CODE_PREFIX. Access codes are compared by md5 digest against the
server's configured codes.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from agent_proxy.config import ACCESS_CODE_PREFIX, Settings
from agent_proxy.credentials import is_access_code, parse_bearer_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    error: bool
    msg: str = ""


def split_token(token: str) -> tuple[str, str]:
    """Return (access_code, api_key); exactly one side may be non-empty."""
    if is_access_code(token):
        return token[len(ACCESS_CODE_PREFIX):], ""
    return "", token


def check_auth(authorization: str | None, settings: Settings) -> AuthResult:
    access_code, api_key = split_token(parse_bearer_token(authorization))
    hashed_code = hashlib.md5(access_code.encode("utf-8")).hexdigest()

    if settings.need_code and hashed_code not in settings.access_codes and not api_key:
        return AuthResult(
            error=True,
            msg="wrong access code" if access_code else "empty access code",
        )

    if settings.hide_user_api_key and api_key:
        return AuthResult(
            error=True,
            msg="you are not allowed to access with your own api key",
        )

    if not api_key and not settings.openai_configured:
        logger.warning("No user api key and no server api key configured")

    return AuthResult(error=False)
