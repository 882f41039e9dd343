"""Repository for the per-user refresh token slot.

Each user has exactly one stored refresh token (single session per
identity). Storing a new one overwrites the previous value, last write
wins. Only the SHA-256 digest of the token is kept.

Concurrent refreshes for the same user race on this slot: whichever
``set`` lands last survives, and the other client's token then fails the
comparison as "expired or used". This is accepted; no locking is done.
"""

import hashlib
import hmac

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.logging import get_logger
from vidtube.domain.exceptions import NotFoundError
from vidtube.infrastructure.persistence.models import UserModel

logger = get_logger(__name__)


class RefreshTokenRepository:
    """Session store adapter owning the users.refresh_token_hash column.

    Writes are single-column UPDATE statements followed by a commit, so no
    other validation runs and the value is durable when the call returns.
    Loaded user objects are not synchronised with the new value.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    @staticmethod
    def hash_token(token: str) -> str:
        """Hash a token using SHA-256.

        Args:
            token: The raw JWT token string.

        Returns:
            SHA-256 hex digest of the token.
        """
        return hashlib.sha256(token.encode()).hexdigest()

    async def get(self, user_id: str) -> str | None:
        """Return the stored refresh token digest for a user.

        Args:
            user_id: The user's UUID.

        Returns:
            The stored digest, or None if the slot is empty.

        Raises:
            NotFoundError: If the user does not exist.
        """
        result = await self._session.execute(
            select(UserModel.id, UserModel.refresh_token_hash).where(UserModel.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("User does not exist")
        return row.refresh_token_hash

    async def set(self, user_id: str, token: str) -> None:
        """Overwrite the stored refresh token unconditionally.

        Raises:
            NotFoundError: If the user does not exist.
        """
        result = await self._session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(refresh_token_hash=self.hash_token(token))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self._session.rollback()
            raise NotFoundError("User does not exist")
        await self._commit()

    async def clear(self, user_id: str) -> None:
        """Empty the slot. A no-op for unknown users."""
        await self._session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(refresh_token_hash=None)
            .execution_options(synchronize_session=False)
        )
        await self._commit()

    async def matches(self, user_id: str, token: str) -> bool:
        """Check the presented token against the stored one.

        Returns:
            True only if the slot holds exactly this token.

        Raises:
            NotFoundError: If the user does not exist.
        """
        stored = await self.get(user_id)
        if stored is None:
            return False
        return hmac.compare_digest(stored, self.hash_token(token))

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except Exception as e:
            logger.error("Failed to persist refresh token", error=str(e))
            await self._session.rollback()
            raise
