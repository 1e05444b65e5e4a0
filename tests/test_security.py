from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from teamflow.core.config import Settings
from teamflow.core.security import create_access_token, decode_token
from teamflow.deps import INVALID_TOKEN, decode_access_token
from teamflow.errors import AuthenticationError
from teamflow.models import UserRole


def test_access_token_carries_identity_claims(settings: Settings) -> None:
    generated = create_access_token(user_id=7, email="ann@example.com", role="user", settings=settings)

    payload = decode_token(
        token=generated.token,
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    assert payload["sub"] == "7"
    assert payload["id"] == 7
    assert payload["email"] == "ann@example.com"
    assert payload["role"] == "user"
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60
    assert generated.expires_in == 24 * 60 * 60


def test_decode_access_token_returns_claims(settings: Settings) -> None:
    generated = create_access_token(user_id=3, email="root@example.com", role="admin", settings=settings)

    claims = decode_access_token(generated.token, settings)

    assert claims.id == 3
    assert claims.role is UserRole.ADMIN


def test_expired_token_is_rejected(settings: Settings) -> None:
    generated = create_access_token(
        user_id=1,
        email="old@example.com",
        role="user",
        settings=settings,
        expires_delta=timedelta(seconds=-5),
    )

    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(generated.token, settings)

    assert exc_info.value.message == INVALID_TOKEN
    assert exc_info.value.status_code == 401


def test_token_signed_with_another_secret_is_rejected(settings: Settings) -> None:
    forged = jwt.encode({"sub": "1", "id": 1, "email": "x@example.com", "role": "admin"}, "not-the-secret")

    with pytest.raises(AuthenticationError):
        decode_access_token(forged, settings)


def test_token_with_missing_claims_is_rejected(settings: Settings) -> None:
    incomplete = jwt.encode({"sub": "1"}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    with pytest.raises(AuthenticationError):
        decode_access_token(incomplete, settings)


def test_missing_secret_generates_ephemeral_key() -> None:
    generated = Settings(environment="test", jwt_secret_key=None)

    assert generated.jwt_secret_generated is True
    assert generated.jwt_secret_key
    assert Settings(environment="test", jwt_secret_key=None).jwt_secret_key != generated.jwt_secret_key
