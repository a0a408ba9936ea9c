"""Security utilities for JWT session tokens and password hashing."""

from datetime import datetime, timezone

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.errors import ExpiredSession, InvalidSession
from app.schemas.auth import SessionClaims

JWT_ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes; longer inputs are rejected
MAX_PASSWORD_BYTES = 72


# =============================================================================
# Session Token (JWT in Authorization header)
# =============================================================================

def create_session_token(claims: SessionClaims, *, now: datetime | None = None) -> str:
    """
    Create signed session JWT.

    Always signs with current secret (JWT_SECRET). The token expires a fixed
    window (JWT_EXPIRES_HOURS, one day) after issuance; there is no refresh.
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = claims.model_dump(by_alias=True, mode="json")
    payload["iat"] = issued_at
    payload["exp"] = issued_at + settings.session_ttl
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_session_token(token: str) -> SessionClaims:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        ExpiredSession: Signature valid but past expiry
        InvalidSession: Bad signature, malformed token or missing claims
    """
    payload = None
    for secret in settings.jwt_secrets:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
            break
        except jwt.ExpiredSignatureError as e:
            # PyJWT checks the signature before expiry, so this secret signed it
            raise ExpiredSession() from e
        except jwt.InvalidTokenError:
            continue

    if payload is None:
        raise InvalidSession()

    try:
        return SessionClaims.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidSession() from e


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        # Older bcrypt releases truncate instead of raising
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


_dummy_hash: str | None = None


def dummy_password_hash() -> str:
    """
    A valid hash that matches nothing useful.

    Verified against when the username is unknown so that both login
    failure paths spend the same bcrypt time.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("complaint-desk-dummy-password")
    return _dummy_hash
