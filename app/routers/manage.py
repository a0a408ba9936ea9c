"""Directory management endpoints (superadmin only)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_blob_store, get_db, require_superadmin
from app.schemas.auth import SessionClaims
from app.schemas.enterprise import EnterpriseCreate, EnterpriseRead
from app.schemas.user import UserCreate, UserRead
from app.services import directory_service
from app.services.blob_storage import BlobStore

router = APIRouter(
    prefix="/api/manage",
    tags=["manage"],
    dependencies=[Depends(require_superadmin)],
)


# =============================================================================
# Enterprises
# =============================================================================

@router.get("/enterprises", response_model=list[EnterpriseRead])
def list_enterprises(db: Session = Depends(get_db)):
    return directory_service.list_enterprises(db)


@router.post("/enterprises", response_model=EnterpriseRead, status_code=201)
def create_enterprise(body: EnterpriseCreate, db: Session = Depends(get_db)):
    return directory_service.create_enterprise(db, body.name)


@router.delete("/enterprises/{enterprise_id}")
def delete_enterprise(
    enterprise_id: int,
    db: Session = Depends(get_db),
    caller: SessionClaims = Depends(require_superadmin),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Delete an enterprise together with its users and complaints."""
    directory_service.delete_enterprise(db, caller, enterprise_id, blob_store)
    return {"message": "Enterprise deleted successfully"}


@router.get("/enterprises/{enterprise_id}/users", response_model=list[UserRead])
def list_enterprise_users(enterprise_id: int, db: Session = Depends(get_db)):
    return directory_service.list_users_of(db, enterprise_id)


# =============================================================================
# Users
# =============================================================================

@router.post("/users", response_model=UserRead, status_code=201)
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    """Create a user; 409 if the username is taken."""
    return directory_service.create_user(
        db,
        username=body.username,
        password=body.password,
        enterprise_id=body.enterprise_id,
        role=body.role,
    )


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    caller: SessionClaims = Depends(require_superadmin),
):
    directory_service.delete_user(db, caller, user_id)
    return {"message": "User deleted successfully"}
