"""Public complaint intake (unauthenticated, tenant taken from the URL)."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_blob_store, get_db
from app.core.errors import ValidationError
from app.core.tenancy import TenantContext
from app.schemas.complaint import ComplaintCreated, ComplaintTextCreate
from app.services import complaint_lifecycle
from app.services.blob_storage import BlobStore

router = APIRouter(prefix="/api", tags=["intake"])


@router.post(
    "/complaint-text/{enterprise_id}",
    response_model=ComplaintCreated,
    status_code=201,
)
def submit_text_complaint(
    enterprise_id: int,
    body: ComplaintTextCreate,
    db: Session = Depends(get_db),
):
    """Submit an inline text complaint to an enterprise."""
    tenant = TenantContext.from_path(enterprise_id)
    complaint = complaint_lifecycle.submit_text(db, tenant, body.complaint)
    return ComplaintCreated(id=complaint.id, message="Complaint submitted successfully!")


@router.post(
    "/complaint-voice/{enterprise_id}",
    response_model=ComplaintCreated,
    status_code=201,
)
async def submit_voice_complaint(
    enterprise_id: int,
    complaint: Annotated[UploadFile | None, File()] = None,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    Submit a recorded voice complaint (multipart field ``complaint``).

    The recording is uploaded to blob storage before the row is written.
    """
    if complaint is None:
        raise ValidationError("No audio file uploaded.")

    # One byte past the limit is enough to reject oversized uploads
    content = await complaint.read(settings.MAX_VOICE_UPLOAD_BYTES + 1)
    upload = complaint_lifecycle.VoiceUpload(
        data=content,
        content_type=complaint.content_type or "application/octet-stream",
        filename=complaint.filename or "recording",
    )
    tenant = TenantContext.from_path(enterprise_id)
    created = await run_in_threadpool(
        complaint_lifecycle.submit_voice, db, tenant, blob_store, upload
    )
    return ComplaintCreated(
        id=created.id,
        message="Voice complaint submitted successfully!",
        filepath=created.filepath,
    )
