"""Pydantic schemas for API request/response models."""

from app.schemas.auth import LoginRequest, MeResponse, SessionClaims, TokenResponse
from app.schemas.complaint import (
    ComplaintCreated,
    ComplaintRead,
    ComplaintStatusUpdate,
    ComplaintTextCreate,
)
from app.schemas.enterprise import EnterpriseCreate, EnterpriseRead
from app.schemas.user import UserCreate, UserRead

__all__ = [
    "ComplaintCreated",
    "ComplaintRead",
    "ComplaintStatusUpdate",
    "ComplaintTextCreate",
    "EnterpriseCreate",
    "EnterpriseRead",
    "LoginRequest",
    "MeResponse",
    "SessionClaims",
    "TokenResponse",
    "UserCreate",
    "UserRead",
]
