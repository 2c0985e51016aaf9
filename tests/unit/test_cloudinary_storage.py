from collections.abc import Callable
from unittest.mock import MagicMock, patch

import pytest

from app.services.storage.cloudinary_storage import CloudinaryStorage


def _sync_loop(mock_get_loop: MagicMock) -> None:
    # Run the executor call inline so the patched SDK function is invoked directly
    mock_loop = MagicMock()
    mock_get_loop.return_value = mock_loop

    async def mock_run(executor: object, func: Callable[[], object]) -> object:
        return func()

    mock_loop.run_in_executor = mock_run


class TestCloudinaryStorage:
    @pytest.fixture
    def storage(self) -> CloudinaryStorage:
        with patch("app.services.storage.cloudinary_storage.config"):
            return CloudinaryStorage()

    @pytest.mark.asyncio
    @patch("app.services.storage.cloudinary_storage.upload")
    @patch("app.services.storage.cloudinary_storage.get_event_loop")
    async def test_upload_returns_public_id_and_secure_url(
        self,
        mock_get_loop: MagicMock,
        mock_upload: MagicMock,
        storage: CloudinaryStorage,
    ) -> None:
        _sync_loop(mock_get_loop)
        mock_upload.return_value = {
            "public_id": "blog/covers/abc",
            "secure_url": "https://res.cloudinary.com/demo/blog/covers/abc.jpg",
        }

        asset = await storage.upload(b"data", "image/jpeg", "covers")

        assert asset.public_id == "blog/covers/abc"
        assert asset.url == "https://res.cloudinary.com/demo/blog/covers/abc.jpg"

        args, kwargs = mock_upload.call_args
        assert args == (b"data",)
        assert kwargs["public_id"].startswith("blog/covers/")
        assert kwargs["resource_type"] == "image"
        assert kwargs["transformation"] == [
            {"quality": "auto:good"},
            {"fetch_format": "auto"},
        ]

    @pytest.mark.asyncio
    @patch("app.services.storage.cloudinary_storage.destroy")
    @patch("app.services.storage.cloudinary_storage.get_event_loop")
    async def test_delete_reports_result(
        self,
        mock_get_loop: MagicMock,
        mock_destroy: MagicMock,
        storage: CloudinaryStorage,
    ) -> None:
        _sync_loop(mock_get_loop)
        mock_destroy.return_value = {"result": "ok"}

        assert await storage.delete("blog/covers/abc") is True
        mock_destroy.assert_called_once_with("blog/covers/abc", resource_type="image")

        mock_destroy.return_value = {"result": "not found"}
        assert await storage.delete("blog/covers/missing") is False

    def test_public_ids_are_unique_per_folder(self, storage: CloudinaryStorage) -> None:
        first = storage._get_public_id("images")
        second = storage._get_public_id("images")

        assert first != second
        assert first.startswith(f"{storage.root_folder}/images/")
