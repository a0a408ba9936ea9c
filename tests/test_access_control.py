"""Role and tenant isolation tests for authenticated routes."""

import pytest
from httpx import AsyncClient

from app.core.errors import Forbidden
from app.core.policies import POLICIES, ensure_access, ensure_role
from app.core.tenancy import TenantContext
from app.db.enums import Role
from app.schemas.auth import SessionClaims
from app.services import complaint_service


def _claims(role: Role, enterprise_id: int = 1) -> SessionClaims:
    return SessionClaims(id=1, username="u", enterprise_id=enterprise_id, role=role)


# =============================================================================
# Policy table
# =============================================================================

def test_directory_policy_is_superadmin_only():
    assert POLICIES["directory"].allowed_roles == frozenset({Role.SUPERADMIN})


def test_ensure_role_rejects_disallowed_role():
    with pytest.raises(Forbidden):
        ensure_role(_claims(Role.ADMIN), frozenset({Role.SUPERADMIN}))


def test_ensure_access_returns_claims_when_allowed():
    claims = _claims(Role.ADMIN)
    assert ensure_access(claims, "complaints") is claims


def test_tenant_from_session_uses_claims_enterprise():
    tenant = TenantContext.from_session(_claims(Role.ADMIN, enterprise_id=42))

    assert tenant.enterprise_id == 42
    assert tenant.source == "session"


# =============================================================================
# Routes
# =============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/api/complaints"),
        ("DELETE", "/api/complaints/1"),
        ("PUT", "/api/complaints/1/status"),
        ("GET", "/api/manage/enterprises"),
        ("POST", "/api/manage/users"),
        ("DELETE", "/api/manage/users/1"),
    ],
)
async def test_protected_routes_require_session(client: AsyncClient, method, path):
    response = await client.request(method, path)

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/api/manage/enterprises"),
        ("POST", "/api/manage/enterprises"),
        ("DELETE", "/api/manage/enterprises/1"),
        ("GET", "/api/manage/enterprises/1/users"),
        ("POST", "/api/manage/users"),
        ("DELETE", "/api/manage/users/1"),
    ],
)
async def test_admin_cannot_use_directory_routes(admin_client: AsyncClient, method, path):
    response = await admin_client.request(method, path)

    assert response.status_code == 403
    assert "not authorized" in response.json()["error"]


@pytest.mark.asyncio
async def test_admin_sees_only_own_enterprise_complaints(
    admin_client: AsyncClient, db, tenant, other_tenant
):
    own = complaint_service.create_text(db, tenant, "broken elevator")
    complaint_service.create_text(db, other_tenant, "noisy neighbours")

    response = await admin_client.get("/api/complaints")

    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [own.id]


@pytest.mark.asyncio
async def test_cross_tenant_status_update_is_not_found(
    admin_client: AsyncClient, db, other_tenant
):
    foreign = complaint_service.create_text(db, other_tenant, "noisy neighbours")

    response = await admin_client.put(
        f"/api/complaints/{foreign.id}/status", json={"status": "resolved"}
    )

    assert response.status_code == 404
    db.expire_all()
    assert complaint_service.get_for_tenant(db, other_tenant, foreign.id).status == "open"


@pytest.mark.asyncio
async def test_cross_tenant_delete_is_not_found(
    admin_client: AsyncClient, db, other_tenant
):
    foreign = complaint_service.create_text(db, other_tenant, "noisy neighbours")

    response = await admin_client.delete(f"/api/complaints/{foreign.id}")

    assert response.status_code == 404
    db.expire_all()
    assert complaint_service.get_for_tenant(db, other_tenant, foreign.id) is not None


@pytest.mark.asyncio
async def test_superadmin_complaint_view_is_scoped_to_platform_enterprise(
    superadmin_client: AsyncClient, db, tenant
):
    complaint_service.create_text(db, tenant, "broken elevator")

    response = await superadmin_client.get("/api/complaints")

    assert response.status_code == 200
    assert response.json() == []
