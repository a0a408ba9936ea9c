"""Tests for Authentication."""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from app.core.errors import InvalidCredentials
from app.core.security import create_session_token, decode_session_token
from app.db.enums import Role
from app.services import auth_service


@pytest.mark.asyncio
async def test_login_returns_session_token(client: AsyncClient, admin_user):
    response = await client.post(
        "/api/auth/login", json={"username": "bob", "password": "pw1"}
    )

    assert response.status_code == 200
    token = response.json()["accessToken"]
    claims = decode_session_token(token)
    assert claims.id == admin_user.id
    assert claims.enterprise_id == admin_user.enterprise_id
    assert claims.role == Role.ADMIN


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_user_look_identical(
    client: AsyncClient, admin_user
):
    wrong_password = await client.post(
        "/api/auth/login", json={"username": "bob", "password": "nope"}
    )
    unknown_user = await client.post(
        "/api/auth/login", json={"username": "nobody", "password": "pw1"}
    )

    assert wrong_password.status_code == 400
    assert unknown_user.status_code == 400
    assert wrong_password.json() == {"error": "Invalid credentials"}
    assert unknown_user.json() == wrong_password.json()


@pytest.mark.asyncio
async def test_login_missing_fields_is_bad_request(client: AsyncClient):
    response = await client.post("/api/auth/login", json={"username": "bob"})

    assert response.status_code == 400
    assert "password" in response.json()["error"]


@pytest.mark.asyncio
async def test_me_requires_session(client: AsyncClient):
    """No bearer token is 401."""
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


@pytest.mark.asyncio
async def test_me_rejects_non_bearer_scheme(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"Authorization": "Basic abc"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_invalid_token(client: AsyncClient):
    """A token that fails verification is 403."""
    response = await client.get(
        "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Invalid session"}


@pytest.mark.asyncio
async def test_me_rejects_expired_token(client: AsyncClient, admin_user):
    token = create_session_token(
        auth_service.claims_for(admin_user),
        now=datetime.now(timezone.utc) - timedelta(days=2),
    )

    response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Session expired"}


@pytest.mark.asyncio
async def test_me_returns_session_identity(client: AsyncClient, admin_user, auth_headers):
    response = await client.get("/api/auth/me", headers=auth_headers(admin_user))

    assert response.status_code == 200
    assert response.json() == {
        "id": admin_user.id,
        "username": "bob",
        "enterpriseId": admin_user.enterprise_id,
        "role": "admin",
    }


@pytest.mark.asyncio
async def test_login_ignores_surrounding_whitespace_in_username(client: AsyncClient, admin_user):
    response = await client.post(
        "/api/auth/login", json={"username": "  bob ", "password": "pw1"}
    )

    assert response.status_code == 200
    assert decode_session_token(response.json()["accessToken"]).id == admin_user.id


def test_blank_username_never_matches(db, admin_user):
    with pytest.raises(InvalidCredentials):
        auth_service.verify_credentials(db, "   ", "pw1")


def test_verify_credentials_rejects_unknown_user(db):
    with pytest.raises(InvalidCredentials):
        auth_service.verify_credentials(db, "ghost", "pw")


def test_login_service_issues_token_for_valid_credentials(db, superadmin_user):
    token = auth_service.login(db, "root", "rootpw")

    claims = decode_session_token(token)
    assert claims.role == Role.SUPERADMIN
    assert claims.enterprise_id == superadmin_user.enterprise_id
