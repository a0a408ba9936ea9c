"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - ADMIN: Reviews and triages complaints of their own enterprise
    - SUPERADMIN: Manages enterprises and users across tenants
    """

    ADMIN = "admin"
    SUPERADMIN = "superadmin"
