"""Complaint store - tenant-scoped reads and writes.

Every function takes a TenantContext and filters on its enterprise_id inside
the SQL statement itself, so a forged complaint id from another tenant simply
matches no row.
"""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFound, UpstreamFailure, ValidationError
from app.core.tenancy import TenantContext
from app.db.enums import DEFAULT_COMPLAINT_STATUS, ComplaintStatus, ComplaintType
from app.db.models import Complaint
from app.services.blob_storage import BlobStorageError, BlobStore, StoredBlob

logger = logging.getLogger(__name__)


def format_complaint_timestamp(now: datetime | None = None, tz_name: str | None = None) -> str:
    """
    Render a timestamp the way complaints have always been stamped.

    en-US locale style in COMPLAINT_TIMEZONE: ``3/14/2025, 9:05:12 AM``.
    """
    moment = (now or datetime.now(timezone.utc)).astimezone(
        ZoneInfo(tz_name or settings.COMPLAINT_TIMEZONE)
    )
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


def create_text(db: Session, tenant: TenantContext, text: str) -> Complaint:
    """
    Store an inline text complaint.

    Raises:
        ValidationError: text is empty or whitespace-only
    """
    if not text or not text.strip():
        raise ValidationError("Complaint text cannot be empty.")

    complaint = Complaint(
        enterprise_id=tenant.enterprise_id,
        complaint=text,
        type=ComplaintType.TEXT.value,
        status=DEFAULT_COMPLAINT_STATUS.value,
        timestamp=format_complaint_timestamp(),
    )
    db.add(complaint)
    db.commit()
    db.refresh(complaint)
    return complaint


def create_voice(db: Session, tenant: TenantContext, blob: StoredBlob) -> Complaint:
    """Store a voice complaint whose recording is already uploaded."""
    complaint = Complaint(
        enterprise_id=tenant.enterprise_id,
        complaint=None,
        type=ComplaintType.VOICE.value,
        status=DEFAULT_COMPLAINT_STATUS.value,
        timestamp=format_complaint_timestamp(),
        filepath=blob.url,
        storage_key=blob.ref,
    )
    db.add(complaint)
    db.commit()
    db.refresh(complaint)
    return complaint


def list_for_tenant(db: Session, tenant: TenantContext) -> list[Complaint]:
    """All complaints of the tenant, newest first."""
    stmt = (
        select(Complaint)
        .where(Complaint.enterprise_id == tenant.enterprise_id)
        .order_by(Complaint.id.desc())
    )
    return list(db.scalars(stmt).all())


def get_for_tenant(db: Session, tenant: TenantContext, complaint_id: int) -> Complaint | None:
    stmt = select(Complaint).where(
        Complaint.id == complaint_id,
        Complaint.enterprise_id == tenant.enterprise_id,
    )
    return db.scalars(stmt).first()


def delete_by_id(
    db: Session,
    tenant: TenantContext,
    complaint_id: int,
    blob_store: BlobStore,
) -> None:
    """
    Delete a complaint owned by the tenant.

    Voice recordings are removed from the blob store first. If that fails
    the row is kept so the delete can be retried.

    Raises:
        NotFound: No such complaint for this tenant
        UpstreamFailure: Blob store delete failed; row left intact
    """
    complaint = get_for_tenant(db, tenant, complaint_id)
    if complaint is None:
        raise NotFound("Complaint not found")

    if complaint.type == ComplaintType.VOICE.value and complaint.storage_key:
        try:
            blob_store.delete(complaint.storage_key)
        except BlobStorageError as e:
            logger.warning(
                "Blob delete failed for complaint %s, keeping row: %s",
                complaint_id,
                e,
                extra={"enterprise_id": tenant.enterprise_id},
            )
            raise UpstreamFailure("Failed to delete voice recording. Please try again.") from e

    result = db.execute(
        delete(Complaint)
        .where(
            Complaint.id == complaint_id,
            Complaint.enterprise_id == tenant.enterprise_id,
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        # Deleted concurrently between the read and the delete
        raise NotFound("Complaint not found")


def update_status(
    db: Session,
    tenant: TenantContext,
    complaint_id: int,
    new_status: str,
) -> Complaint:
    """
    Set a complaint's status. Last writer wins.

    Raises:
        ValidationError: new_status is not open/resolved
        NotFound: No such complaint for this tenant
    """
    if not ComplaintStatus.has_value(new_status):
        allowed = ", ".join(s.value for s in ComplaintStatus)
        raise ValidationError(f"Invalid status '{new_status}'. Must be one of: {allowed}")

    result = db.execute(
        update(Complaint)
        .where(
            Complaint.id == complaint_id,
            Complaint.enterprise_id == tenant.enterprise_id,
        )
        .values(status=new_status)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        raise NotFound("Complaint not found")

    complaint = get_for_tenant(db, tenant, complaint_id)
    if complaint is None:
        raise NotFound("Complaint not found")
    db.refresh(complaint)
    return complaint
