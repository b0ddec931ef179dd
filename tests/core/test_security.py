"""
Tests for password hashing and access tokens.
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from aarogya.auth.exceptions import InvalidTokenException, TokenExpiredException
from aarogya.auth.models import UserRole
from aarogya.config import settings
from aarogya.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_password_is_salted():
    first = hash_password("secret123")
    second = hash_password("secret123")

    assert first != second
    assert first != "secret123"
    assert verify_password("secret123", first)
    assert verify_password("secret123", second)


def test_verify_password_rejects_wrong_or_empty_input():
    hashed = hash_password("secret123")

    assert not verify_password("Secret123", hashed)
    assert not verify_password("", hashed)
    assert not verify_password("secret123", "")
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_token_round_trip_carries_id_and_role():
    token = create_access_token("user-1", UserRole.DOCTOR)
    identity = decode_access_token(token)

    assert identity.id == "user-1"
    assert identity.role == UserRole.DOCTOR

    claims = jwt.get_unverified_claims(token)
    assert set(claims) == {"id", "role", "iat", "exp"}
    assert claims["exp"] - claims["iat"] == settings.access_token_expire_minutes * 60


def test_token_valid_within_lifetime():
    issued_at = datetime.now(timezone.utc) - timedelta(hours=1)
    token = create_access_token("user-1", "patient", issued_at=issued_at)

    assert decode_access_token(token).role == UserRole.PATIENT


def test_token_rejected_after_lifetime():
    issued_at = datetime.now(timezone.utc) - timedelta(hours=25)
    token = create_access_token("user-1", "patient", issued_at=issued_at)

    with pytest.raises(TokenExpiredException) as exc_info:
        decode_access_token(token)
    assert exc_info.value.error == "invalid_token"


def test_token_signed_with_other_secret_is_rejected():
    now = datetime.now(timezone.utc)
    forged = jwt.encode(
        {"id": "user-1", "role": "admin", "iat": now, "exp": now + timedelta(hours=1)},
        "some-other-secret",
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenException):
        decode_access_token(forged)


def test_tampered_token_is_rejected():
    token = create_access_token("user-1", "patient")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(InvalidTokenException):
        decode_access_token(tampered)


@pytest.mark.parametrize("claims", [
    {"role": "patient"},
    {"id": "user-1", "role": "superuser"},
])
def test_token_with_bad_payload_is_rejected(claims):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {**claims, "iat": now, "exp": now + timedelta(hours=1)},
        settings.secret_key,
        algorithm=settings.algorithm,
    )

    with pytest.raises(InvalidTokenException):
        decode_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(InvalidTokenException):
        decode_access_token("not.a.token")
