"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.db.enums import Role


class SessionClaims(BaseModel):
    """
    Identity, tenant and role carried by a session token.

    Serialized with camelCase keys (``enterpriseId``) inside the JWT.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    enterprise_id: int = Field(alias="enterpriseId")
    role: Role


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")


class MeResponse(BaseModel):
    """Response schema for GET /api/auth/me."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    enterprise_id: int = Field(alias="enterpriseId")
    role: Role
