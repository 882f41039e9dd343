"""FastAPI dependencies for authentication and shared services.

The access token is read from the ``accessToken`` cookie or, failing that,
from an ``Authorization: Bearer <token>`` header.
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.logging import get_logger
from vidtube.domain.exceptions import UnauthorizedError
from vidtube.domain.services import AuthService
from vidtube.infrastructure.api.cookies import ACCESS_TOKEN_COOKIE
from vidtube.infrastructure.auth import TokenConfig, TokenIssuer, TokenVerifier
from vidtube.infrastructure.persistence.database import get_db_session
from vidtube.infrastructure.persistence.models import UserModel
from vidtube.infrastructure.persistence.repositories import (
    RefreshTokenRepository,
    UserRepository,
)
from vidtube.infrastructure.storage import LocalStorageProvider, StorageProvider

logger = get_logger(__name__)

SettingsDep = Annotated[Settings, Depends(get_settings)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_token_config(settings: SettingsDep) -> TokenConfig:
    """Build the immutable token configuration from settings."""
    return TokenConfig.from_settings(settings)


def get_token_issuer(config: Annotated[TokenConfig, Depends(get_token_config)]) -> TokenIssuer:
    return TokenIssuer(config)


def get_token_verifier(
    config: Annotated[TokenConfig, Depends(get_token_config)],
) -> TokenVerifier:
    return TokenVerifier(config)


def get_auth_service(
    session: DbSession,
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthService:
    """Assemble the auth service for the current request."""
    return AuthService(
        user_repo=UserRepository(session),
        refresh_token_repo=RefreshTokenRepository(session),
        issuer=issuer,
        verifier=verifier,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def _extract_access_token(request: Request, authorization: str | None) -> str | None:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
        logger.info("Authentication failed: invalid Authorization header format")
    return None


async def get_current_user(
    request: Request,
    auth_service: AuthServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> UserModel:
    """Resolve the authenticated user from the request's access token.

    Raises:
        UnauthorizedError: 401 if the token is missing, invalid or expired.
    """
    token = _extract_access_token(request, authorization)
    try:
        return await auth_service.authenticate(token)
    except UnauthorizedError as e:
        logger.info("Authentication failed", reason=e.message, path=str(request.url.path))
        raise


CurrentUser = Annotated[UserModel, Depends(get_current_user)]


def get_storage_provider(settings: SettingsDep) -> StorageProvider:
    """Media storage used for avatars and cover images."""
    return LocalStorageProvider(settings)


Storage = Annotated[StorageProvider, Depends(get_storage_provider)]
