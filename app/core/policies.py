"""Centralized RBAC policies for API resources."""

import logging
from dataclasses import dataclass

from app.core.errors import Forbidden
from app.db.enums import Role
from app.schemas.auth import SessionClaims

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourcePolicy:
    """Roles allowed to act on a resource."""

    allowed_roles: frozenset[Role]


POLICIES: dict[str, ResourcePolicy] = {
    # Complaint triage is tenant-scoped, so any signed-in role may use it
    "complaints": ResourcePolicy(allowed_roles=frozenset({Role.ADMIN, Role.SUPERADMIN})),
    "directory": ResourcePolicy(allowed_roles=frozenset({Role.SUPERADMIN})),
}


def get_policy(resource: str) -> ResourcePolicy:
    """Fetch a resource policy or raise KeyError."""
    return POLICIES[resource]


def ensure_role(claims: SessionClaims, allowed: frozenset[Role]) -> SessionClaims:
    """
    The single role check used by every protected route.

    Raises:
        Forbidden: claims.role is not one of ``allowed``
    """
    if claims.role not in allowed:
        logger.warning(
            "Role %s denied (requires %s)",
            claims.role.value,
            sorted(r.value for r in allowed),
            extra={"user_id": claims.id, "enterprise_id": claims.enterprise_id},
        )
        raise Forbidden(f"Role '{claims.role.value}' not authorized for this action")
    return claims


def ensure_access(claims: SessionClaims, resource: str) -> SessionClaims:
    return ensure_role(claims, get_policy(resource).allowed_roles)
