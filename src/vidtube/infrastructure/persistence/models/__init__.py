"""SQLAlchemy models for VidTube.

All models inherit from the Base class defined in database.py and are
automatically created on application startup in development mode.
"""

from vidtube.infrastructure.persistence.models.subscription import SubscriptionModel
from vidtube.infrastructure.persistence.models.user import UserModel
from vidtube.infrastructure.persistence.models.video import VideoModel
from vidtube.infrastructure.persistence.models.watch_history import WatchHistoryModel

__all__ = [
    "SubscriptionModel",
    "UserModel",
    "VideoModel",
    "WatchHistoryModel",
]
