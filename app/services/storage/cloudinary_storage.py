"""
Cloudinary storage implementation.

This module provides a Cloudinary-based storage backend for production
use. Offers automatic image optimization and CDN delivery.
"""

from asyncio import get_event_loop
from functools import partial
from uuid import uuid4

from cloudinary import config
from cloudinary.uploader import destroy, upload

from app.configs.settings import settings
from app.schemas.media import MediaAsset


class CloudinaryStorage:
    """
    Cloudinary storage implementation.

    The SDK is synchronous, so every call runs in the default thread pool.
    """

    def __init__(self) -> None:
        """Initialize Cloudinary with configured credentials."""
        config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET.get_secret_value(),
            secure=True,
        )
        self.root_folder = settings.CLOUDINARY_FOLDER

    def _get_public_id(self, folder: str) -> str:
        """
        Build a unique Cloudinary public ID inside a folder.

        Args:
            folder: Storage folder (e.g., "covers", "images")

        Returns:
            str: Cloudinary public ID
        """
        return f"{self.root_folder}/{folder}/{uuid4().hex}"

    async def upload(
        self,
        file_data: bytes,
        content_type: str,
        folder: str,
    ) -> MediaAsset:
        """
        Upload an image to Cloudinary.

        Args:
            file_data: Raw image bytes
            content_type: MIME type of the image
            folder: Storage folder

        Returns:
            MediaAsset: Cloudinary public ID and secure URL
        """
        loop = get_event_loop()
        result = await loop.run_in_executor(
            None,
            partial(
                upload,
                file_data,
                public_id=self._get_public_id(folder),
                overwrite=True,
                resource_type="image",
                transformation=[
                    {"quality": "auto:good"},
                    {"fetch_format": "auto"},
                ],
            ),
        )

        return MediaAsset(public_id=result["public_id"], url=result["secure_url"])

    async def delete(self, public_id: str) -> bool:
        """
        Delete an image from Cloudinary.

        Args:
            public_id: Cloudinary public ID

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        loop = get_event_loop()
        result = await loop.run_in_executor(
            None,
            partial(destroy, public_id, resource_type="image"),
        )

        return result.get("result") == "ok"
