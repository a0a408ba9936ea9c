"""Complaint schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.db.enums import ComplaintStatus, ComplaintType


class ComplaintTextCreate(BaseModel):
    complaint: str = Field(..., max_length=10000)


class ComplaintStatusUpdate(BaseModel):
    # Plain str so unknown values reach the lifecycle check and map to 400
    status: str


class ComplaintCreated(BaseModel):
    id: int
    message: str
    filepath: str | None = None


class ComplaintRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    enterprise_id: int
    complaint: str | None
    type: ComplaintType
    status: ComplaintStatus
    timestamp: str
    filepath: str | None
