"""Media storage providers for avatars and cover images."""

from vidtube.infrastructure.storage.base import StorageProvider, StoredMedia
from vidtube.infrastructure.storage.local_storage_provider import LocalStorageProvider

__all__ = ["LocalStorageProvider", "StorageProvider", "StoredMedia"]
