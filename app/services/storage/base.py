"""
Base storage protocol for file storage operations.

This module defines the interface for storage backends, allowing for
different implementations (local filesystem, Cloudinary).
"""

from abc import abstractmethod
from typing import Protocol

from app.schemas.media import MediaAsset


class StorageService(Protocol):
    """
    Protocol defining the interface for storage services.

    Both calls may fail independently; callers decide whether a failure
    aborts the operation or is only logged.
    """

    @abstractmethod
    async def upload(
        self,
        file_data: bytes,
        content_type: str,
        folder: str,
    ) -> MediaAsset:
        """
        Upload an image.

        Args:
            file_data: Raw image bytes
            content_type: MIME type of the image
            folder: Logical folder the asset is filed under

        Returns:
            MediaAsset: Identifier and public URL of the stored image
        """
        ...

    @abstractmethod
    async def delete(self, public_id: str) -> bool:
        """
        Delete an image.

        Args:
            public_id: Identifier returned by ``upload``

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        ...
