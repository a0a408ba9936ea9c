"""Directory service - enterprises and their users (superadmin only)."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, SelfDeletionForbidden, ValidationError
from app.core.security import MAX_PASSWORD_BYTES, hash_password
from app.db.enums import ComplaintType, Role
from app.db.models import Complaint, Enterprise, User
from app.schemas.auth import SessionClaims
from app.services.blob_storage import BlobStorageError, BlobStore

logger = logging.getLogger(__name__)

PLATFORM_ENTERPRISE_NAME = "SaaS Platform Admin"


# =============================================================================
# Enterprises
# =============================================================================

def get_enterprise(db: Session, enterprise_id: int) -> Enterprise | None:
    """Get enterprise by ID."""
    return db.get(Enterprise, enterprise_id)


def list_enterprises(db: Session) -> list[Enterprise]:
    stmt = select(Enterprise).order_by(Enterprise.name, Enterprise.id)
    return list(db.scalars(stmt).all())


def create_enterprise(db: Session, name: str) -> Enterprise:
    """
    Raises:
        ValidationError: name is blank
    """
    clean_name = (name or "").strip()
    if not clean_name:
        raise ValidationError("Enterprise name cannot be empty.")
    enterprise = Enterprise(name=clean_name)
    db.add(enterprise)
    db.commit()
    db.refresh(enterprise)
    return enterprise


def delete_enterprise(
    db: Session,
    caller: SessionClaims,
    enterprise_id: int,
    blob_store: BlobStore | None = None,
) -> None:
    """
    Delete an enterprise; its users and complaints go with it through the
    foreign keys' ON DELETE CASCADE.

    Voice recordings of the removed complaints are deleted afterwards on a
    best-effort basis, since the rows are already gone.

    Raises:
        SelfDeletionForbidden: caller belongs to this enterprise
        NotFound: no such enterprise
    """
    if enterprise_id == caller.enterprise_id:
        raise SelfDeletionForbidden("You cannot delete your own enterprise")

    voice_refs = list(
        db.scalars(
            select(Complaint.storage_key).where(
                Complaint.enterprise_id == enterprise_id,
                Complaint.type == ComplaintType.VOICE.value,
                Complaint.storage_key.is_not(None),
            )
        ).all()
    )

    result = db.execute(
        delete(Enterprise)
        .where(Enterprise.id == enterprise_id)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        raise NotFound("Enterprise not found")

    logger.info(
        "Deleted enterprise %s", enterprise_id, extra={"user_id": caller.id}
    )

    if blob_store is None:
        return
    for ref in voice_refs:
        try:
            blob_store.delete(ref)
        except BlobStorageError as e:
            logger.warning("Orphaned voice blob %s after enterprise delete: %s", ref, e)


# =============================================================================
# Users
# =============================================================================

def normalize_username(username: str | None) -> str:
    """Usernames are stored and looked up without surrounding whitespace."""
    return (username or "").strip()


def get_user_by_username(db: Session, username: str) -> User | None:
    clean_username = normalize_username(username)
    if not clean_username:
        return None
    return db.scalars(select(User).where(User.username == clean_username)).first()


def list_users_of(db: Session, enterprise_id: int) -> list[User]:
    """
    Raises:
        NotFound: no such enterprise
    """
    if get_enterprise(db, enterprise_id) is None:
        raise NotFound("Enterprise not found")
    stmt = (
        select(User)
        .where(User.enterprise_id == enterprise_id)
        .order_by(User.username, User.id)
    )
    return list(db.scalars(stmt).all())


def create_user(
    db: Session,
    username: str,
    password: str,
    enterprise_id: int,
    role: Role = Role.ADMIN,
) -> User:
    """
    Create a directory user with a bcrypt-hashed password.

    Raises:
        ValidationError: blank username/password or password too long
        NotFound: enterprise does not exist
        Conflict: username already taken
    """
    clean_username = normalize_username(username)
    if not clean_username:
        raise ValidationError("Username cannot be empty.")
    if not password:
        raise ValidationError("Password cannot be empty.")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    if get_enterprise(db, enterprise_id) is None:
        raise NotFound("Enterprise not found")

    user = User(
        enterprise_id=enterprise_id,
        username=clean_username,
        password_hash=hash_password(password),
        role=Role(role).value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if get_user_by_username(db, clean_username) is not None:
            raise Conflict(f"Username '{clean_username}' already exists") from e
        raise NotFound("Enterprise not found") from e
    db.refresh(user)
    return user


def delete_user(db: Session, caller: SessionClaims, user_id: int) -> None:
    """
    Raises:
        SelfDeletionForbidden: caller tried to delete their own account
        NotFound: no such user
    """
    if user_id == caller.id:
        raise SelfDeletionForbidden()

    result = db.execute(
        delete(User)
        .where(User.id == user_id)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        raise NotFound("User not found")
    logger.info("Deleted user %s", user_id, extra={"user_id": caller.id})


# =============================================================================
# Bootstrap
# =============================================================================

def bootstrap_superadmin(db: Session, username: str, password: str) -> tuple[User, bool]:
    """
    Ensure the platform enterprise and a superadmin user exist.

    Idempotent: an existing user with that username is returned untouched.
    Returns (user, created).
    """
    existing = get_user_by_username(db, username)
    if existing is not None:
        return existing, False

    platform = db.scalars(
        select(Enterprise).where(Enterprise.name == PLATFORM_ENTERPRISE_NAME)
    ).first()
    if platform is None:
        platform = create_enterprise(db, PLATFORM_ENTERPRISE_NAME)

    user = create_user(db, username, password, platform.id, role=Role.SUPERADMIN)
    return user, True
