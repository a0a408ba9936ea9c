"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.errors import Unauthenticated
from app.core.policies import ensure_access
from app.core.security import decode_session_token
from app.core.tenancy import TenantContext
from app.schemas.auth import SessionClaims
from app.services.blob_storage import BlobStore

AUTH_HEADER = "Authorization"
AUTH_SCHEME = "bearer"


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency.

    Sessions come from the factory the app built at startup; the session is
    closed after the request.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get(AUTH_HEADER)
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != AUTH_SCHEME or not token.strip():
        return None
    return token.strip()


def require_session(request: Request) -> SessionClaims:
    """
    Verify the bearer session token and attach its claims to the request.

    Raises:
        Unauthenticated (401): no bearer token presented
        InvalidSession / ExpiredSession (403): token rejected
    """
    token = _bearer_token(request)
    if token is None:
        raise Unauthenticated()

    claims = decode_session_token(token)
    request.state.session = claims
    return claims


def require_complaint_access(
    claims: SessionClaims = Depends(require_session),
) -> SessionClaims:
    return ensure_access(claims, "complaints")


def require_superadmin(
    claims: SessionClaims = Depends(require_session),
) -> SessionClaims:
    """
    Raises:
        Forbidden (403): role is not superadmin
    """
    return ensure_access(claims, "directory")


def get_session_tenant(
    claims: SessionClaims = Depends(require_complaint_access),
) -> TenantContext:
    """
    Get the tenant for query scoping.

    Every complaint query on an authenticated route MUST use this value
    to ensure proper tenant isolation.
    """
    return TenantContext.from_session(claims)
