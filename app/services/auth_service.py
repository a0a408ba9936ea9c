"""Auth service - credential checks and session issuance."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import InvalidCredentials
from app.core.security import create_session_token, dummy_password_hash, verify_password
from app.db.enums import Role
from app.db.models import User
from app.schemas.auth import SessionClaims
from app.services import directory_service

logger = logging.getLogger(__name__)


def verify_credentials(db: Session, username: str, password: str) -> User:
    """
    Return the user for a username/password pair.

    Unknown username and wrong password raise the same InvalidCredentials,
    and both run one bcrypt verification.
    """
    user = directory_service.get_user_by_username(db, username)
    if user is None:
        verify_password(password, dummy_password_hash())
        logger.info("Login failed: invalid credentials")
        raise InvalidCredentials()

    if not verify_password(password, user.password_hash):
        logger.info("Login failed: invalid credentials", extra={"user_id": user.id})
        raise InvalidCredentials()

    return user


def claims_for(user: User) -> SessionClaims:
    return SessionClaims(
        id=user.id,
        username=user.username,
        enterprise_id=user.enterprise_id,
        role=Role(user.role),
    )


def login(db: Session, username: str, password: str) -> str:
    """Verify credentials and issue a session token."""
    user = verify_credentials(db, username, password)
    logger.info(
        "Login succeeded",
        extra={"user_id": user.id, "enterprise_id": user.enterprise_id},
    )
    return create_session_token(claims_for(user))
