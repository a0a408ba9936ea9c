"""Enterprise (tenant) schemas."""

from pydantic import BaseModel, ConfigDict, Field


class EnterpriseCreate(BaseModel):
    name: str = Field(..., max_length=255)


class EnterpriseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
