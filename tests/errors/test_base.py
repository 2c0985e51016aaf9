# tests/errors/test_base.py
"""Tests for app/errors/base.py module."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from httpx import ASGITransport, AsyncClient

from app.configs.settings import DEFAULT_ERROR_MESSAGE
from app.errors import (
    BaseAppError,
    BlogNotFoundError,
    BlogValidationError,
    CoverImageUploadError,
    UnsupportedImageTypeError,
    create_exception_handler,
    create_unhandled_exception_handler,
    error_content,
)


def mock_request(client_host: str | None = "192.168.1.1", path: str = "/blogs") -> MagicMock:
    request = MagicMock()
    if client_host is None:
        request.client = None
    else:
        request.client.host = client_host
    request.url.path = path
    return request


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_custom_values(self) -> None:
        error = BaseAppError(detail="Custom error", status_code=400)
        assert error.detail == "Custom error"
        assert error.status_code == 400

    def test_str_representation(self) -> None:
        assert str(BaseAppError(detail="Test error")) == "Test error"


class TestBlogErrors:
    def test_not_found_default(self) -> None:
        error = BlogNotFoundError()
        assert error.status_code == 404
        assert error.detail == "No blog found"

    def test_validation_status(self) -> None:
        assert BlogValidationError("Invalid tags").status_code == 400

    def test_cover_upload_default(self) -> None:
        error = CoverImageUploadError()
        assert error.status_code == 500
        assert error.detail == "Error uploading cover image to Cloudinary"


def test_error_content() -> None:
    assert error_content("Invalid tags") == {"status": "error", "message": "Invalid tags"}
    assert error_content("x", field="tags") == {"status": "error", "message": "x", "field": "tags"}


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    @pytest.mark.asyncio
    async def test_handler_with_base_app_error(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(mock_request(), BlogValidationError("Invalid tags"))

        assert response.status_code == 400
        assert response.body == b'{"status":"error","message":"Invalid tags"}'
        logger.warning.assert_called_once_with(
            "Invalid tags for ip: 192.168.1.1 for endpoint /blogs",
        )

    @pytest.mark.asyncio
    async def test_handler_with_generic_exception(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(mock_request("127.0.0.1"), ValueError("boom"))

        assert response.status_code == 500
        assert response.body == b'{"status":"error","message":"Internal Server Error"}'

    @pytest.mark.asyncio
    async def test_handler_with_no_client(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        await handler(mock_request(None), BaseAppError(detail="Error"))

        logger.warning.assert_called_once_with("Error for ip: unknown for endpoint /blogs")

    @pytest.mark.asyncio
    async def test_handler_includes_extra_attributes(self) -> None:
        handler = create_exception_handler(MagicMock())

        error = UnsupportedImageTypeError("image/gif", ["image/jpeg"])
        response = await handler(mock_request(), error)

        assert response.status_code == 415
        assert isinstance(response, ORJSONResponse)
        assert b'"content_type":"image/gif"' in response.body
        assert b'"allowed_types":["image/jpeg"]' in response.body


@pytest.mark.asyncio
async def test_unhandled_exception_handler_hides_details() -> None:
    logger = MagicMock()
    app = FastAPI()
    app.add_exception_handler(Exception, create_unhandled_exception_handler(logger))

    @app.get("/explode")
    async def explode() -> None:
        raise RuntimeError("database password is hunter2")

    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app, raise_app_exceptions=False),
    ) as ac:
        response = await ac.get("/explode")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": DEFAULT_ERROR_MESSAGE}
    logger.exception.assert_called_once()
