"""Authentication endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_session
from app.schemas.auth import LoginRequest, MeResponse, SessionClaims, TokenResponse
from app.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange username/password for a bearer session token (valid one day).

    Unknown username and wrong password both return 400 "Invalid credentials".
    """
    token = auth_service.login(db, body.username, body.password)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
def me(claims: SessionClaims = Depends(require_session)):
    """Return the identity carried by the current session token."""
    return MeResponse(
        id=claims.id,
        username=claims.username,
        enterprise_id=claims.enterprise_id,
        role=claims.role,
    )
