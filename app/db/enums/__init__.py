"""Enum definitions for application constants."""

from app.db.enums.auth import Role
from app.db.enums.complaints import (
    DEFAULT_COMPLAINT_STATUS,
    ComplaintStatus,
    ComplaintType,
)

__all__ = [
    "ComplaintStatus",
    "ComplaintType",
    "DEFAULT_COMPLAINT_STATUS",
    "Role",
]
