"""Tenant context threaded into every complaint store call."""

from dataclasses import dataclass
from typing import Literal

from app.schemas.auth import SessionClaims

TenantSource = Literal["path", "session"]


@dataclass(frozen=True)
class TenantContext:
    """
    The enterprise a request acts on, and where that id came from.

    Built once per request: from the URL path on the public intake routes,
    from verified session claims everywhere else. Never from a request body.
    """

    enterprise_id: int
    source: TenantSource

    @classmethod
    def from_path(cls, enterprise_id: int) -> "TenantContext":
        return cls(enterprise_id=enterprise_id, source="path")

    @classmethod
    def from_session(cls, claims: SessionClaims) -> "TenantContext":
        return cls(enterprise_id=claims.enterprise_id, source="session")
