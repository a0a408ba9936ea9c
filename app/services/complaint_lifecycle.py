"""Complaint lifecycle - intake dispatch and status transitions.

    open --resolve--> resolved
    resolved --reopen--> open

Intake is the only entry point. There is no terminal state: resolved
complaints stay listed and can be reopened at any time.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFound, UpstreamFailure, ValidationError
from app.core.tenancy import TenantContext
from app.db.enums import ComplaintStatus
from app.db.models import Complaint
from app.services import complaint_service, directory_service
from app.services.blob_storage import BlobStorageError, BlobStore, build_storage_key

logger = logging.getLogger(__name__)

ALLOWED_VOICE_PREFIXES = ("audio/", "video/")  # MediaRecorder often reports video/webm


@dataclass(frozen=True)
class VoiceUpload:
    data: bytes
    content_type: str
    filename: str = "recording"


def _require_enterprise(db: Session, tenant: TenantContext) -> None:
    if directory_service.get_enterprise(db, tenant.enterprise_id) is None:
        raise NotFound("Enterprise not found")


def validate_voice_upload(upload: VoiceUpload) -> None:
    """
    Raises:
        ValidationError: empty file, non audio/video type, or too large
    """
    if not upload.data:
        raise ValidationError("No audio file uploaded.")
    content_type = (upload.content_type or "").lower()
    if not content_type.startswith(ALLOWED_VOICE_PREFIXES):
        raise ValidationError(f"Content type '{upload.content_type}' not allowed")
    if len(upload.data) > settings.MAX_VOICE_UPLOAD_BYTES:
        max_mb = settings.MAX_VOICE_UPLOAD_BYTES / (1024 * 1024)
        raise ValidationError(f"File size exceeds {max_mb:.0f} MB limit")


def submit_text(db: Session, tenant: TenantContext, text: str) -> Complaint:
    _require_enterprise(db, tenant)
    try:
        return complaint_service.create_text(db, tenant, text)
    except IntegrityError as e:
        db.rollback()
        raise NotFound("Enterprise not found") from e


def submit_voice(
    db: Session,
    tenant: TenantContext,
    blob_store: BlobStore,
    upload: VoiceUpload,
) -> Complaint:
    """
    Upload the recording, then insert the row.

    An upload failure writes nothing. An insert failure after a successful
    upload deletes the blob again; if that cleanup fails too, the caller
    gets UpstreamFailure.
    """
    validate_voice_upload(upload)
    _require_enterprise(db, tenant)

    key = build_storage_key(tenant.enterprise_id, upload.content_type)
    try:
        blob = blob_store.upload(upload.data, key=key, content_type=upload.content_type)
    except BlobStorageError as e:
        logger.warning(
            "Voice upload failed: %s", e, extra={"enterprise_id": tenant.enterprise_id}
        )
        raise UpstreamFailure("Failed to upload voice recording. Please try again.") from e

    try:
        return complaint_service.create_voice(db, tenant, blob)
    except Exception as insert_error:
        db.rollback()
        logger.warning(
            "Voice complaint insert failed, removing uploaded blob %s",
            blob.ref,
            extra={"enterprise_id": tenant.enterprise_id},
        )
        try:
            blob_store.delete(blob.ref)
        except BlobStorageError as cleanup_error:
            logger.error("Orphaned voice blob %s: %s", blob.ref, cleanup_error)
            raise UpstreamFailure("Failed to save voice complaint.") from cleanup_error
        if isinstance(insert_error, IntegrityError):
            raise NotFound("Enterprise not found") from insert_error
        raise


def transition(
    db: Session,
    tenant: TenantContext,
    complaint_id: int,
    target: str,
) -> Complaint:
    """
    Move a complaint to ``target`` with one scoped status write.

    Re-applying the current status is accepted.
    """
    complaint = complaint_service.update_status(db, tenant, complaint_id, target)
    logger.info(
        "Complaint %s set to %s",
        complaint_id,
        complaint.status,
        extra={"enterprise_id": tenant.enterprise_id},
    )
    return complaint


def resolve(db: Session, tenant: TenantContext, complaint_id: int) -> Complaint:
    return transition(db, tenant, complaint_id, ComplaintStatus.RESOLVED.value)


def reopen(db: Session, tenant: TenantContext, complaint_id: int) -> Complaint:
    return transition(db, tenant, complaint_id, ComplaintStatus.OPEN.value)
