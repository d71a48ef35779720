"""
Demo authentication: the bearer token is the acting user's id.

There is no token validation; the token only tells the ACL which user is
acting. A request without the header is anonymous and the ACL denies it.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from app.security.context import Principal
from app.settings import Settings

logger = logging.getLogger(__name__)


class BearerTokenError(ValueError):
    """Authorization header present but not of the form `<prefix> <user id>`."""


def parse_bearer_user_id(raw: str, prefix: str) -> int:
    scheme, _, token = raw.partition(" ")
    if scheme != prefix:
        raise BearerTokenError(f"expected '{prefix} <user id>'")
    token = token.strip()
    if not token.isdigit():
        raise BearerTokenError("token must be an integer user id")
    return int(token)


def authenticate(request: Request, settings: Settings) -> Principal:
    raw = request.headers.get(settings.authorization_header)
    if not raw:
        return Principal(user_id=None)

    try:
        user_id = parse_bearer_user_id(raw, settings.bearer_prefix)
    except BearerTokenError as exc:
        logger.warning("Rejected %s header path=%s: %s", settings.authorization_header, request.url.path, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {settings.authorization_header}: {exc}",
        ) from exc
    return Principal(user_id=user_id)
