"""Unit tests for JWT handler and the principal dependency."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from jose import jwt

from config.settings import settings
from src.ob_common.errors import InvalidCredentialsError
from src.ob_gateway.auth.dependencies import Principal, get_current_principal
from src.ob_gateway.auth.jwt_handler import create_access_token, decode_access_token


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("user-123", "org-7")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["org_id"] == "org-7"
    assert payload["type"] == "access"


def test_decode_valid_access_token() -> None:
    payload = decode_access_token(create_access_token("user-abc", "org-1"))
    assert payload["sub"] == "user-abc"
    assert payload["org_id"] == "org-1"


def test_expired_token_raises_credentials_error() -> None:
    with patch(
        "src.ob_gateway.auth.jwt_handler._ACCESS_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_access_token("user-abc", "org-1")
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


def test_wrong_signature_raises() -> None:
    token = jwt.encode(
        {"sub": "u", "org_id": "o", "type": "access"}, "another-secret", algorithm="HS256"
    )
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


def test_non_access_token_raises() -> None:
    token = jwt.encode(
        {"sub": "u", "org_id": "o", "type": "refresh"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


async def test_principal_from_valid_token() -> None:
    principal = await get_current_principal(create_access_token("user-1", "org-1"))
    assert principal == Principal(user_id="user-1", org_id="org-1")


async def test_principal_requires_org_claim() -> None:
    token = jwt.encode(
        {"sub": "u", "type": "access"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM
    )
    with pytest.raises(HTTPException) as exc_info:
        await get_current_principal(token)
    assert exc_info.value.status_code == 401


async def test_principal_invalid_token() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_principal("garbage")
    assert exc_info.value.status_code == 401
