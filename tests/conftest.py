"""
Test configuration and fixtures.

Provides:
- A fresh in-memory SQLite database per test (foreign keys enforced)
- An in-memory blob store that records uploads/deletes and can fail on demand
- Session token minting for authenticated tests
- HTTPX AsyncClient over the ASGI app
"""
import os
import tempfile
from dataclasses import dataclass, field
from typing import AsyncGenerator, Generator

# Configure before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["LOCAL_STORAGE_PATH"] = tempfile.mkdtemp(prefix="complaint-desk-test-")
os.environ["COMPLAINT_TIMEZONE"] = "UTC"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.security import create_session_token
from app.core.tenancy import TenantContext
from app.db.base import Base
from app.db.enums import Role
from app.db.models import Enterprise, User
from app.db.session import create_engine_with_settings
from app.main import create_app
from app.services import auth_service, directory_service
from app.services.blob_storage import BlobStorageError, BlobStore, StoredBlob


# =============================================================================
# Blob store double
# =============================================================================

@dataclass
class FakeBlobStore(BlobStore):
    """Keeps blobs in a dict; flip fail_upload/fail_delete to simulate outages."""

    blobs: dict[str, bytes] = field(default_factory=dict)
    deleted: list[str] = field(default_factory=list)
    fail_upload: bool = False
    fail_delete: bool = False

    def upload(self, data: bytes, *, key: str, content_type: str) -> StoredBlob:
        if self.fail_upload:
            raise BlobStorageError("blob store unavailable")
        self.blobs[key] = data
        return StoredBlob(url=f"https://blobs.test/{key}", ref=key)

    def delete(self, ref: str) -> None:
        if self.fail_delete:
            raise BlobStorageError("blob store unavailable")
        self.blobs.pop(ref, None)
        self.deleted.append(ref)


# =============================================================================
# App / Database Fixtures
# =============================================================================

@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def app(blob_store: FakeBlobStore) -> Generator[FastAPI, None, None]:
    """App wired to its own in-memory database."""
    test_settings = Settings(DATABASE_URL="sqlite://")
    engine = create_engine_with_settings(test_settings)
    Base.metadata.create_all(engine)

    application = create_app(test_settings, engine=engine, blob_store=blob_store)
    yield application

    engine.dispose()


@pytest.fixture
def db(app: FastAPI) -> Generator[Session, None, None]:
    """Session on the same database the app uses."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def enterprise(db: Session) -> Enterprise:
    return directory_service.create_enterprise(db, "Acme")


@pytest.fixture
def other_enterprise(db: Session) -> Enterprise:
    return directory_service.create_enterprise(db, "Globex")


@pytest.fixture
def platform_enterprise(db: Session) -> Enterprise:
    return directory_service.create_enterprise(db, directory_service.PLATFORM_ENTERPRISE_NAME)


@pytest.fixture
def admin_user(db: Session, enterprise: Enterprise) -> User:
    return directory_service.create_user(db, "bob", "pw1", enterprise.id)


@pytest.fixture
def other_admin(db: Session, other_enterprise: Enterprise) -> User:
    return directory_service.create_user(db, "gina", "pw2", other_enterprise.id)


@pytest.fixture
def superadmin_user(db: Session, platform_enterprise: Enterprise) -> User:
    return directory_service.create_user(
        db, "root", "rootpw", platform_enterprise.id, role=Role.SUPERADMIN
    )


@pytest.fixture
def tenant(enterprise: Enterprise) -> TenantContext:
    return TenantContext.from_path(enterprise.id)


@pytest.fixture
def other_tenant(other_enterprise: Enterprise) -> TenantContext:
    return TenantContext.from_path(other_enterprise.id)


# =============================================================================
# Auth Fixtures
# =============================================================================

def token_for(user: User) -> str:
    """Mint a session token for a user."""
    return create_session_token(auth_service.claims_for(user))


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def auth_headers():
    """Build Authorization headers for any user: auth_headers(user)."""
    return bearer


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient for public endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def admin_client(app: FastAPI, admin_user: User) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient signed in as the Acme admin."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=bearer(admin_user),
    ) as c:
        yield c


@pytest.fixture
async def superadmin_client(
    app: FastAPI, superadmin_user: User
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient signed in as the platform superadmin."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=bearer(superadmin_user),
    ) as c:
        yield c
