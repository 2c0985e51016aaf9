# tests/managers/test_token_manager.py
"""Tests for app/managers/token_manager.py module."""

from datetime import timedelta
from uuid import uuid4

from jose import jwt

from app.configs import settings
from app.managers.token_manager import create_access_token, decode_access_token


def test_round_trip_keeps_identity() -> None:
    user_id = uuid4()
    token = create_access_token(user_id=user_id, username="alice")

    data = decode_access_token(token)

    assert data is not None
    assert data.user_id == user_id
    assert data.username == "alice"
    assert data.token_type == "access"


def test_expired_token_rejected() -> None:
    token = create_access_token(uuid4(), "alice", expires_delta=timedelta(seconds=-5))

    assert decode_access_token(token) is None


def test_wrong_audience_rejected() -> None:
    token = jwt.encode(
        {"sub": "alice", "user_id": str(uuid4()), "jti": "x", "type": "access", "aud": "other"},
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )

    assert decode_access_token(token) is None


def test_refresh_token_rejected() -> None:
    token = jwt.encode(
        {
            "sub": "alice",
            "user_id": str(uuid4()),
            "jti": "x",
            "type": "refresh",
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        },
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )

    assert decode_access_token(token) is None


def test_garbage_rejected() -> None:
    assert decode_access_token("not-a-token") is None
