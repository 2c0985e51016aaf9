"""
Media upload service.

This module provides the service that validates, optimizes and stores
blog images, and releases them again when a post no longer needs them.
"""

from asyncio import gather
from collections.abc import Iterable, Sequence
from io import BytesIO

from fastapi import UploadFile
from PIL import Image

from app.configs.settings import settings
from app.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
)
from app.monitoring import get_logger
from app.schemas.media import MediaAsset
from app.services.storage import StorageService, get_storage_service

logger = get_logger(__name__)

COVER_FOLDER = "covers"
GALLERY_FOLDER = "images"


class MediaService:
    """
    Service for managing blog images.

    Handles image validation, processing, and storage operations.
    """

    def __init__(self, storage: StorageService | None = None) -> None:
        """
        Initialize the media service.

        Args:
            storage: Optional storage service instance. If not provided,
                    the default storage service will be used.
        """
        self.storage = storage or get_storage_service()

        self.image_max_size_bytes = settings.MEDIA_IMAGE_MAX_SIZE_MB * 1024 * 1024
        self.image_allowed_types = settings.MEDIA_IMAGE_ALLOWED_TYPES
        self.image_max_count_blog = settings.MEDIA_IMAGE_MAX_COUNT_BLOG
        self.image_max_dimension = settings.MEDIA_IMAGE_MAX_DIMENSION
        self.image_quality = settings.MEDIA_IMAGE_QUALITY

    def _validate_image_type(self, content_type: str | None) -> None:
        """Validate image content type."""
        if not content_type or content_type not in self.image_allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.image_allowed_types,
            )

    def _validate_image_size(self, file_data: bytes) -> None:
        """Validate image file size."""
        actual_size = len(file_data)
        if actual_size > self.image_max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.MEDIA_IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def _validate_image_content(self, file_data: bytes) -> Image.Image:
        """Validate that the file is a valid image."""
        try:
            img = Image.open(BytesIO(file_data))
            img.verify()
            # verify() leaves the image unusable, so reopen it
            return Image.open(BytesIO(file_data))
        except Exception as e:
            mssg = f"Invalid or corrupted image file: {e!s}"
            raise InvalidImageError(mssg) from e

    def _process_image(self, img: Image.Image) -> tuple[bytes, str]:
        """Downscale oversized images and re-encode them as JPEG."""
        try:
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            img.thumbnail((self.image_max_dimension, self.image_max_dimension))

            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=self.image_quality, optimize=True)
            return buffer.getvalue(), "image/jpeg"
        except Exception as e:
            mssg = f"Failed to process image: {e!s}"
            raise ImageProcessingError(mssg) from e

    def cap_gallery(self, current_count: int, files: Sequence[UploadFile]) -> list[UploadFile]:
        """
        Keep only as many incoming images as the gallery has room for.

        Images past the configured maximum are dropped and logged, the
        same way a failed gallery upload is.

        Args:
            current_count: Images already stored on the post
            files: Uploaded files, in request order

        Returns:
            list[UploadFile]: The files to upload, in request order
        """
        room = max(self.image_max_count_blog - current_count, 0)
        if len(files) > room:
            logger.warning(
                "Dropping gallery images past the limit",
                max_count=self.image_max_count_blog,
                dropped=len(files) - room,
            )
        return list(files[:room])

    async def upload_image(self, file: UploadFile, folder: str = GALLERY_FOLDER) -> MediaAsset:
        """
        Validate, optimize and store one image.

        Args:
            file: Uploaded file
            folder: Storage folder

        Returns:
            MediaAsset: Reference to the stored image

        Raises:
            UploadError: If validation, processing or storage fails
        """
        self._validate_image_type(file.content_type)
        file_data = await file.read()
        self._validate_image_size(file_data)
        img = self._validate_image_content(file_data)
        processed_data, content_type = self._process_image(img)

        try:
            return await self.storage.upload(processed_data, content_type, folder)
        except Exception as e:
            logger.exception("Storage upload failed", filename=file.filename, folder=folder)
            raise StorageError from e

    async def upload_gallery(
        self,
        files: Sequence[UploadFile],
        folder: str = GALLERY_FOLDER,
    ) -> list[MediaAsset]:
        """
        Upload images concurrently, keeping the ones that succeed.

        Args:
            files: Uploaded files, in request order
            folder: Storage folder

        Returns:
            list[MediaAsset]: Stored images in request order (failures omitted)
        """
        results = await gather(
            *(self.upload_image(file, folder) for file in files),
            return_exceptions=True,
        )

        assets: list[MediaAsset] = []
        for file, result in zip(files, results, strict=True):
            if isinstance(result, MediaAsset):
                assets.append(result)
            elif isinstance(result, Exception):
                logger.warning(
                    "Dropping gallery image that failed to upload",
                    filename=file.filename,
                    error=str(result),
                    error_type=type(result).__name__,
                )
            else:
                raise result
        return assets

    async def delete_asset(self, public_id: str) -> bool:
        """
        Delete a stored image.

        Args:
            public_id: Identifier of the stored image

        Returns:
            bool: True if the storage reported a deletion

        Raises:
            StorageError: If the storage call fails
        """
        try:
            return await self.storage.delete(public_id)
        except Exception as e:
            logger.exception("Storage delete failed", public_id=public_id)
            raise StorageError from e

    async def release(self, public_ids: Iterable[str]) -> None:
        """
        Delete images without letting failures propagate.

        Args:
            public_ids: Identifiers of the images to delete
        """
        ids = list(public_ids)
        results = await gather(*(self.delete_asset(pid) for pid in ids), return_exceptions=True)
        for public_id, result in zip(ids, results, strict=True):
            if isinstance(result, Exception):
                logger.warning("Could not release image", public_id=public_id)
            elif result is False:
                logger.info("Image was already gone from storage", public_id=public_id)
