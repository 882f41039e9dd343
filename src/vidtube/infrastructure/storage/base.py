"""Base abstractions for media storage providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO


@dataclass(slots=True)
class StoredMedia:
    """Result of storing a media file."""

    url: str
    path: str
    filename: str
    mime_type: str
    size: int


class StorageProvider(ABC):
    """Abstract base class for media storage providers."""

    @abstractmethod
    async def save_file(
        self,
        folder: str,
        file_content: BinaryIO,
        filename: str,
        mime_type: str,
        size: int,
    ) -> StoredMedia:
        """Save a file to the provider."""
        ...

    @abstractmethod
    async def delete_file(self, path: str) -> None:
        """Delete a file from the provider."""
        ...

    @abstractmethod
    def path_for_url(self, url: str | None) -> str | None:
        """Return the storage path for a URL this provider issued, else None."""
        ...
