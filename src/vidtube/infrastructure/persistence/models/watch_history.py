"""SQLAlchemy model for a user's watch history."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.infrastructure.persistence.database import Base


class WatchHistoryModel(Base):
    """One entry per (user, video) view, newest first when read."""

    __tablename__ = "watch_history"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    video_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
    )
    watched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    video: Mapped["VideoModel"] = relationship("VideoModel")  # noqa: F821

    __table_args__ = (
        Index("ix_watch_history_user_watched", "user_id", "watched_at"),
    )
