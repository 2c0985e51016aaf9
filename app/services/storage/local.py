"""
Local filesystem storage implementation.

This module provides a local storage backend for development
and testing purposes. Files are stored in the local filesystem
and served from ``/uploads``.
"""

from pathlib import Path
from uuid import uuid4

import aiofiles
from aiofiles.os import remove

from app.configs.settings import settings
from app.schemas.media import MediaAsset


class LocalStorage:
    """
    Local filesystem storage implementation.

    The public ID of a stored file is its path relative to the uploads
    directory, so it can be served and deleted without a lookup table.
    """

    def __init__(self, uploads_dir: Path | None = None) -> None:
        """Initialize local storage with configured paths."""
        self.uploads_dir = uploads_dir or settings.UPLOADS_DIR
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _get_extension(self, content_type: str) -> str:
        """
        Get file extension from content type.

        Args:
            content_type: MIME type of the image

        Returns:
            str: File extension
        """
        extensions = {
            "image/jpeg": "jpg",
            "image/png": "png",
            "image/webp": "webp",
        }
        return extensions.get(content_type, "jpg")

    def _resolve(self, public_id: str) -> Path | None:
        """Map a public ID back to a file, refusing paths outside the uploads dir."""
        root = self.uploads_dir.resolve()
        file_path = (root / public_id).resolve()
        if not file_path.is_relative_to(root):
            return None
        return file_path

    async def upload(
        self,
        file_data: bytes,
        content_type: str,
        folder: str,
    ) -> MediaAsset:
        """
        Write an image to the local filesystem.

        Args:
            file_data: Raw image bytes
            content_type: MIME type of the image
            folder: Sub-directory of the uploads directory

        Returns:
            MediaAsset: Relative path and URL path of the stored image
        """
        media_dir = self.uploads_dir / folder
        media_dir.mkdir(parents=True, exist_ok=True)

        public_id = f"{folder}/{uuid4().hex}.{self._get_extension(content_type)}"

        async with aiofiles.open(self.uploads_dir / public_id, "wb") as f:
            await f.write(file_data)

        return MediaAsset(public_id=public_id, url=f"/uploads/{public_id}")

    async def delete(self, public_id: str) -> bool:
        """
        Delete an image from the local filesystem.

        Args:
            public_id: Path relative to the uploads directory

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        file_path = self._resolve(public_id)
        if file_path is None or not file_path.exists():
            return False
        await remove(file_path)
        return True
