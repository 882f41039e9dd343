"""Auth cookie helpers.

Both credential cookies are always ``httponly`` and ``secure``, for set and
clear alike.
"""

from fastapi import Response

from vidtube.core.config import Settings
from vidtube.domain.services import TokenPair

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def set_auth_cookies(
    response: Response,
    tokens: TokenPair,
    settings: Settings,
) -> None:
    """Attach both tokens to the response as cookies."""
    lifetimes = {
        ACCESS_TOKEN_COOKIE: (tokens.access_token, settings.access_token_ttl),
        REFRESH_TOKEN_COOKIE: (tokens.refresh_token, settings.refresh_token_ttl),
    }
    for name, (value, ttl) in lifetimes.items():
        response.set_cookie(
            key=name,
            value=value,
            max_age=int(ttl.total_seconds()),
            path="/",
            httponly=True,
            secure=True,
            samesite=settings.cookie_samesite,
        )


def clear_auth_cookies(response: Response, settings: Settings) -> None:
    """Instruct the client to drop both credential cookies."""
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            key=name,
            path="/",
            httponly=True,
            secure=True,
            samesite=settings.cookie_samesite,
        )
