"""Tests for session tokens and password hashing."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core.config import settings
from app.core.errors import ExpiredSession, InvalidSession
from app.core.security import (
    JWT_ALGORITHM,
    create_session_token,
    decode_session_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from app.db.enums import Role
from app.schemas.auth import SessionClaims


def _claims() -> SessionClaims:
    return SessionClaims(id=3, username="bob", enterprise_id=7, role=Role.ADMIN)


def test_session_token_round_trip_carries_identity_tenant_and_role():
    token = create_session_token(_claims())

    claims = decode_session_token(token)

    assert claims.id == 3
    assert claims.username == "bob"
    assert claims.enterprise_id == 7
    assert claims.role == Role.ADMIN


def test_session_token_payload_uses_camel_case_and_one_day_expiry():
    issued = datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc)
    token = create_session_token(_claims(), now=issued)

    payload = jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[JWT_ALGORITHM],
        options={"verify_exp": False},
    )

    assert payload["enterpriseId"] == 7
    assert payload["role"] == "admin"
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_expired_token_is_rejected():
    token = create_session_token(
        _claims(), now=datetime.now(timezone.utc) - timedelta(days=2)
    )

    with pytest.raises(ExpiredSession):
        decode_session_token(token)


def test_token_signed_with_unknown_secret_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "id": 3,
            "username": "bob",
            "enterpriseId": 7,
            "role": "admin",
            "iat": now,
            "exp": now + timedelta(hours=1),
        },
        "some-other-secret",
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(InvalidSession):
        decode_session_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(InvalidSession):
        decode_session_token("not-a-jwt")


def test_token_missing_claims_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"id": 3, "iat": now, "exp": now + timedelta(hours=1)},
        settings.JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(InvalidSession):
        decode_session_token(token)


def test_token_with_unknown_role_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "id": 3,
            "username": "bob",
            "enterpriseId": 7,
            "role": "owner",
            "iat": now,
            "exp": now + timedelta(hours=1),
        },
        settings.JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(InvalidSession):
        decode_session_token(token)


def test_previous_secret_still_verifies_during_rotation(monkeypatch):
    old_token = create_session_token(_claims())

    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", settings.JWT_SECRET)
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")

    assert decode_session_token(old_token).username == "bob"


def test_rotated_out_secret_no_longer_verifies(monkeypatch):
    old_token = create_session_token(_claims())

    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", "")

    with pytest.raises(InvalidSession):
        decode_session_token(old_token)


def test_password_hash_verifies_and_never_stores_plaintext():
    hashed = hash_password("pw1")

    assert hashed != "pw1"
    assert hashed.startswith("$2")
    assert verify_password("pw1", hashed)
    assert not verify_password("pw2", hashed)


def test_verify_password_against_malformed_hash_is_false():
    assert verify_password("pw1", "not-a-bcrypt-hash") is False


def test_dummy_hash_is_stable_and_matches_nothing_obvious():
    first = dummy_password_hash()

    assert dummy_password_hash() == first
    assert not verify_password("", first)
    assert not verify_password("pw1", first)


def test_verify_password_rejects_overlong_password_sharing_a_72_byte_prefix():
    stored = hash_password("p" * 72)

    assert verify_password("p" * 72, stored)
    assert not verify_password("p" * 72 + "extra", stored)
