from pathlib import Path

import pytest

from app.services.storage.local import LocalStorage


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(uploads_dir=tmp_path / "uploads")


@pytest.mark.asyncio
async def test_upload_writes_file(storage: LocalStorage) -> None:
    asset = await storage.upload(b"jpeg-bytes", "image/jpeg", "covers")

    assert asset.public_id.startswith("covers/")
    assert asset.public_id.endswith(".jpg")
    assert asset.url == f"/uploads/{asset.public_id}"
    assert (storage.uploads_dir / asset.public_id).read_bytes() == b"jpeg-bytes"


@pytest.mark.asyncio
async def test_upload_uses_content_type_extension(storage: LocalStorage) -> None:
    asset = await storage.upload(b"png", "image/png", "images")

    assert asset.public_id.endswith(".png")


@pytest.mark.asyncio
async def test_delete_removes_file(storage: LocalStorage) -> None:
    asset = await storage.upload(b"data", "image/jpeg", "images")

    assert await storage.delete(asset.public_id) is True
    assert not (storage.uploads_dir / asset.public_id).exists()
    assert await storage.delete(asset.public_id) is False


@pytest.mark.asyncio
async def test_delete_refuses_paths_outside_uploads(storage: LocalStorage, tmp_path: Path) -> None:
    outside = tmp_path / "secret.txt"
    outside.write_text("keep me")

    assert await storage.delete("../secret.txt") is False
    assert outside.exists()
