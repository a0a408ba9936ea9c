"""Directory user schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.db.enums import Role


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., max_length=255)
    password: str
    enterprise_id: int = Field(alias="enterpriseId")
    role: Role = Role.ADMIN


class UserRead(BaseModel):
    """User as returned by the directory API. Never includes the hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    enterprise_id: int
    role: Role
