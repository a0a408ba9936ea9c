"""Complaint triage endpoints for signed-in enterprise users."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_blob_store, get_db, get_session_tenant
from app.core.tenancy import TenantContext
from app.schemas.complaint import ComplaintRead, ComplaintStatusUpdate
from app.services import complaint_lifecycle, complaint_service
from app.services.blob_storage import BlobStore

router = APIRouter(prefix="/api/complaints", tags=["complaints"])


@router.get("", response_model=list[ComplaintRead])
def list_complaints(
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_session_tenant),
):
    """List the caller's enterprise complaints, newest first."""
    return complaint_service.list_for_tenant(db, tenant)


@router.delete("/{complaint_id}")
def delete_complaint(
    complaint_id: int,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_session_tenant),
    blob_store: BlobStore = Depends(get_blob_store),
):
    complaint_service.delete_by_id(db, tenant, complaint_id, blob_store)
    return {"message": "Complaint deleted successfully"}


@router.put("/{complaint_id}/status", response_model=ComplaintRead)
def update_complaint_status(
    complaint_id: int,
    body: ComplaintStatusUpdate,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_session_tenant),
):
    """Resolve or reopen a complaint (status must be "open" or "resolved")."""
    return complaint_lifecycle.transition(db, tenant, complaint_id, body.status)
