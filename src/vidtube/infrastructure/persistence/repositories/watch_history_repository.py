"""Watch history repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from vidtube.infrastructure.persistence.models import VideoModel, WatchHistoryModel


class WatchHistoryRepository:
    """Repository for a user's watched videos."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_videos(self, user_id: str) -> list[VideoModel]:
        """Get watched videos for a user, most recent first.

        Each video has its owner eagerly loaded.
        """
        result = await self.session.execute(
            select(WatchHistoryModel)
            .where(WatchHistoryModel.user_id == user_id)
            .options(selectinload(WatchHistoryModel.video).selectinload(VideoModel.owner))
            .order_by(WatchHistoryModel.watched_at.desc(), WatchHistoryModel.id.desc())
        )
        return [entry.video for entry in result.scalars().all()]
