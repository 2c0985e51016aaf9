# tests/managers/test_rate_limiter.py
"""Tests for app/managers/rate_limiter.py module."""

import json
from unittest.mock import MagicMock, patch

import pytest
from slowapi.errors import RateLimitExceeded

from app.managers.rate_limiter import (
    RATE_LIMIT_MESSAGE,
    get_identifier,
    limiter,
    rate_limit_exceeded_handler,
)


class TestGetIdentifier:
    """Tests for get_identifier function."""

    def test_returns_api_key_when_present(self) -> None:
        request = MagicMock()
        request.headers.get.return_value = "test-api-key-123"

        assert get_identifier(request) == "apikey:test-api-key-123"

    def test_returns_ip_when_no_api_key(self) -> None:
        request = MagicMock()
        request.headers.get.return_value = None

        with patch(
            "app.managers.rate_limiter.get_remote_address",
            return_value="192.168.1.100",
        ):
            assert get_identifier(request) == "ip:192.168.1.100"


def test_limiter_does_not_inject_headers() -> None:
    assert limiter._key_func is get_identifier
    assert limiter._headers_enabled is False


@pytest.mark.asyncio
async def test_rate_limit_exceeded_handler_envelope() -> None:
    limit = MagicMock()
    limit.error_message = None
    limit.limit = "500 per 15 minute"
    request = MagicMock()
    request.client.host = "10.0.0.1"
    request.url.path = "/blogs"

    response = await rate_limit_exceeded_handler(request, RateLimitExceeded(limit))

    assert response.status_code == 429
    assert json.loads(response.body) == {
        "status": "error",
        "message": RATE_LIMIT_MESSAGE,
        "allowed_requests": "500 per 15 minute",
    }
