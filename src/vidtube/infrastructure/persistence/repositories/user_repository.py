"""User repository for database operations."""

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.infrastructure.persistence.models import UserModel


class UserRepository:
    """Repository for user database operations.

    Methods flush but do not commit, except ``update_password_hash`` which
    is a write-through used by the auth service.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user."""
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID (UUID string).

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> UserModel | None:
        """Get a user by username (case-insensitive)."""
        result = await self.session.execute(
            select(UserModel).where(UserModel.username == username.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_by_identifier(self, identifier: str) -> UserModel | None:
        """Get a user whose username or email equals ``identifier``.

        Usernames and emails are stored lower-cased, so the lookup is
        case-insensitive.

        Args:
            identifier: A username or an email address.

        Returns:
            User model if found, None otherwise.
        """
        value = identifier.strip().lower()
        result = await self.session.execute(
            select(UserModel).where(
                or_(UserModel.username == value, UserModel.email == value)
            )
        )
        return result.scalars().first()

    async def username_or_email_exists(self, username: str, email: str) -> bool:
        """Check whether a username or an email is already taken."""
        result = await self.session.execute(
            select(UserModel.id)
            .where(
                or_(
                    UserModel.username == username.strip().lower(),
                    UserModel.email == email.strip().lower(),
                )
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def email_taken_by_other(self, email: str, user_id: str) -> bool:
        """Check whether another user already uses ``email``."""
        result = await self.session.execute(
            select(UserModel.id)
            .where(UserModel.email == email.strip().lower(), UserModel.id != user_id)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def update_password_hash(self, user_id: str, password_hash: str) -> None:
        """Store a new password hash and commit.

        A single-column UPDATE, so no other field is touched (the refresh
        token in particular).

        Args:
            user_id: ID of the user to update.
            password_hash: The new Argon2 hash.
        """
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash)
            .execution_options(synchronize_session=False)
        )
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def update_fields(self, user_id: str, **values: str | None) -> UserModel | None:
        """Update profile columns and return the refreshed user.

        Args:
            user_id: ID of the user to update.
            **values: Column values (e.g. full_name, email, avatar, cover_image).

        Returns:
            The updated user, or None if no such user exists.
        """
        await self.session.execute(
            update(UserModel).where(UserModel.id == user_id).values(**values)
        )
        await self.session.flush()
        user = await self.get_by_id(user_id)
        if user is not None:
            await self.session.refresh(user)
        return user
