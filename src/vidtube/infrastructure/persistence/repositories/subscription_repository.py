"""Subscription repository for database operations."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.infrastructure.persistence.models import SubscriptionModel


class SubscriptionRepository:
    """Repository for subscriber/channel counts and membership checks."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def count_subscribers(self, channel_id: str) -> int:
        """Number of users subscribed to a channel."""
        result = await self.session.execute(
            select(func.count(SubscriptionModel.id)).where(
                SubscriptionModel.channel_id == channel_id
            )
        )
        return result.scalar_one() or 0

    async def count_subscribed_to(self, subscriber_id: str) -> int:
        """Number of channels a user is subscribed to."""
        result = await self.session.execute(
            select(func.count(SubscriptionModel.id)).where(
                SubscriptionModel.subscriber_id == subscriber_id
            )
        )
        return result.scalar_one() or 0

    async def is_subscribed(self, subscriber_id: str, channel_id: str) -> bool:
        """Check whether a user is subscribed to a channel."""
        result = await self.session.execute(
            select(SubscriptionModel.id)
            .where(
                SubscriptionModel.subscriber_id == subscriber_id,
                SubscriptionModel.channel_id == channel_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None
