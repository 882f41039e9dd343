"""Local filesystem media storage provider."""

import asyncio
import uuid
from pathlib import Path
from typing import BinaryIO

from vidtube.core.config import Settings, get_settings
from vidtube.core.logging import get_logger
from vidtube.domain.exceptions import ValidationError
from vidtube.infrastructure.storage.base import StorageProvider, StoredMedia

logger = get_logger(__name__)


class LocalStorageProvider(StorageProvider):
    """Stores media under ``settings.storage_path`` and serves it from
    ``settings.media_base_url``."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.storage_path = Path(self.settings.storage_path)

    def _generate_unique_filename(self, original_filename: str) -> str:
        suffix = Path(original_filename).suffix
        return f"{uuid.uuid4().hex}{suffix}"

    def validate_file_size(self, size: int) -> None:
        if size <= 0:
            raise ValidationError("Uploaded file is empty")
        if size > self.settings.max_file_size:
            max_size_mb = self.settings.max_file_size / (1024 * 1024)
            actual_size_mb = size / (1024 * 1024)
            raise ValidationError(
                f"File size ({actual_size_mb:.2f}MB) exceeds maximum allowed "
                f"size ({max_size_mb:.2f}MB)"
            )

    def validate_mime_type(self, mime_type: str) -> None:
        if mime_type not in self.settings.allowed_image_types:
            raise ValidationError(
                f"File type '{mime_type}' is not allowed. "
                f"Allowed types: {', '.join(self.settings.allowed_image_types)}"
            )

    async def save_file(
        self,
        folder: str,
        file_content: BinaryIO,
        filename: str,
        mime_type: str,
        size: int,
    ) -> StoredMedia:
        """Validate and write a file, returning its public URL.

        Raises:
            ValidationError: If the file is empty, too large or of a
                disallowed type.
        """
        self.validate_file_size(size)
        self.validate_mime_type(mime_type)

        storage_key = f"{folder}/{self._generate_unique_filename(filename)}"
        await asyncio.to_thread(self._write, file_content.read(), storage_key)

        logger.info("Media file saved", folder=folder, path=storage_key, size=size)
        return StoredMedia(
            url=f"{self.settings.media_base_url.rstrip('/')}/{storage_key}",
            path=storage_key,
            filename=filename,
            mime_type=mime_type,
            size=size,
        )

    def _write(self, content: bytes, storage_key: str) -> None:
        file_path = self.storage_path / storage_key
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(content)

    async def delete_file(self, path: str) -> None:
        file_path = self.storage_path / path
        await asyncio.to_thread(file_path.unlink, missing_ok=True)
        logger.info("Media file deleted", path=path)

    def path_for_url(self, url: str | None) -> str | None:
        """Map a URL produced by this provider back to its storage key."""
        prefix = f"{self.settings.media_base_url.rstrip('/')}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None
