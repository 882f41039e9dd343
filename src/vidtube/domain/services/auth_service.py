"""Authentication service.

Implements the session lifecycle on top of the password hasher, the JWT
issuer/verifier and the refresh token store:

    Anonymous --login--> Authenticated --logout--> Anonymous
    Authenticated --refresh--> Authenticated (refresh token rotated)

A user has at most one valid refresh token: the one currently stored. Each
login or refresh overwrites it, so a rotated-out token is rejected even
before it expires.
"""

from dataclasses import dataclass

from vidtube.core.logging import get_logger
from vidtube.domain.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from vidtube.infrastructure.auth import (
    AccessClaims,
    TokenClass,
    TokenIssuer,
    TokenVerifier,
    hash_password,
    needs_rehash,
    verify_password,
)
from vidtube.infrastructure.persistence.models import UserModel
from vidtube.infrastructure.persistence.repositories import (
    RefreshTokenRepository,
    UserRepository,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenPair:
    """A freshly issued access/refresh token pair."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful login."""

    user: UserModel
    tokens: TokenPair


class AuthService:
    """Service for login, token refresh, logout and password changes."""

    def __init__(
        self,
        user_repo: UserRepository,
        refresh_token_repo: RefreshTokenRepository,
        issuer: TokenIssuer,
        verifier: TokenVerifier,
    ) -> None:
        """Initialize the auth service.

        Args:
            user_repo: Repository for user lookups and password updates.
            refresh_token_repo: Store for the per-user refresh token slot.
            issuer: Signs access and refresh tokens.
            verifier: Verifies presented tokens.
        """
        self.user_repo = user_repo
        self.refresh_token_repo = refresh_token_repo
        self.issuer = issuer
        self.verifier = verifier

    def _issue_pair(self, user: UserModel) -> TokenPair:
        access_token = self.issuer.issue_access(
            AccessClaims(
                id=user.id,
                email=user.email,
                username=user.username,
                display_name=user.full_name,
            )
        )
        refresh_token = self.issuer.issue_refresh(user.id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def _rotate(self, user: UserModel) -> TokenPair:
        """Issue a new pair and make its refresh token the only valid one.

        If persisting fails the error propagates and no tokens are returned.
        """
        tokens = self._issue_pair(user)
        await self.refresh_token_repo.set(user.id, tokens.refresh_token)
        return tokens

    async def login(self, identifier: str | None, password: str | None) -> AuthResult:
        """Authenticate by username or email and start a session.

        Args:
            identifier: Username or email.
            password: Plaintext password.

        Returns:
            AuthResult with the user and a new token pair.

        Raises:
            ValidationError: If identifier or password is missing.
            NotFoundError: If no user matches the identifier.
            InvalidCredentialsError: If the password is wrong.
        """
        if not identifier or not identifier.strip():
            raise ValidationError("Username or email is required")
        if not password:
            raise ValidationError("Password is required")

        user = await self.user_repo.get_by_identifier(identifier)
        if user is None:
            logger.info("Login failed: user not found", identifier=identifier)
            raise NotFoundError("User does not exist")

        if not verify_password(password, user.password_hash):
            logger.info("Login failed: invalid password", user_id=user.id)
            raise InvalidCredentialsError("Invalid user credentials")

        if needs_rehash(user.password_hash):
            await self.user_repo.update_password_hash(user.id, hash_password(password))
            logger.info("Password hash upgraded", user_id=user.id)

        tokens = await self._rotate(user)
        logger.info("User logged in successfully", user_id=user.id, username=user.username)
        return AuthResult(user=user, tokens=tokens)

    async def refresh(self, presented_token: str | None) -> TokenPair:
        """Exchange the current refresh token for a new pair.

        Args:
            presented_token: The refresh token sent by the client.

        Returns:
            The new token pair; the presented token is no longer valid.

        Raises:
            UnauthorizedError: If the token is missing, invalid, expired,
                belongs to no user, or is not the currently stored one.
        """
        if not presented_token:
            raise UnauthorizedError("Unauthorized request")

        result = self.verifier.verify(presented_token, TokenClass.REFRESH)
        if result.is_expired:
            logger.info("Token refresh failed: token expired")
            raise UnauthorizedError("Refresh token has expired")
        if not result.is_valid:
            logger.info("Token refresh failed: invalid token", reason=result.reason)
            raise UnauthorizedError("Invalid refresh token")

        user = await self.user_repo.get_by_id(result.claims["id"])
        if user is None:
            logger.info("Token refresh failed: user not found", user_id=result.claims["id"])
            raise UnauthorizedError("Invalid refresh token")

        if not await self.refresh_token_repo.matches(user.id, presented_token):
            logger.info("Token refresh failed: token superseded or revoked", user_id=user.id)
            raise UnauthorizedError("Refresh token is expired or used")

        tokens = await self._rotate(user)
        logger.info("Tokens refreshed", user_id=user.id)
        return tokens

    async def logout(self, user_id: str) -> None:
        """End the user's session by clearing the stored refresh token."""
        await self.refresh_token_repo.clear(user_id)
        logger.info("User logged out", user_id=user_id)

    async def change_password(
        self, user_id: str, old_password: str | None, new_password: str | None
    ) -> None:
        """Replace the user's password after checking the current one.

        The stored refresh token is left as is.

        Raises:
            ValidationError: If either password is missing.
            NotFoundError: If the user no longer exists.
            InvalidCredentialsError: If ``old_password`` is wrong.
        """
        if not old_password or not new_password:
            raise ValidationError("Old and new passwords are required")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User does not exist")

        if not verify_password(old_password, user.password_hash):
            logger.info("Password change failed: invalid old password", user_id=user_id)
            raise InvalidCredentialsError("Invalid old password")

        await self.user_repo.update_password_hash(user.id, hash_password(new_password))
        logger.info("Password changed", user_id=user_id)

    async def authenticate(self, access_token: str | None) -> UserModel:
        """Resolve the user behind an access token.

        Raises:
            UnauthorizedError: If the token is missing, invalid or expired,
                or the user no longer exists.
        """
        if not access_token:
            raise UnauthorizedError("Unauthorized request")

        result = self.verifier.verify(access_token, TokenClass.ACCESS)
        if result.is_expired:
            raise UnauthorizedError("Access token has expired")
        if not result.is_valid:
            raise UnauthorizedError("Invalid access token")

        user = await self.user_repo.get_by_id(result.claims["id"])
        if user is None:
            raise UnauthorizedError("Invalid access token")
        return user
