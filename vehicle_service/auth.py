"""
Password hashing, JWT tokens and the authentication dependencies.
"""
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from vehicle_service.config import get_settings
from vehicle_service.database import get_db, parse_object_id, utcnow
from vehicle_service.models.user import User, UserRole

ACCESS_PURPOSE = "access"
RESET_PURPOSE = "reset"

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _encode(claims: dict, expires_delta: timedelta) -> str:
    settings = get_settings()
    payload = dict(claims)
    payload["exp"] = utcnow() + expires_delta
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(user: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a bearer token carrying the user id and role."""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(
        {"sub": str(user["_id"]), "role": user.get("role"), "purpose": ACCESS_PURPOSE},
        expires_delta,
    )


def create_reset_token(user: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a short-lived password reset token."""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.reset_token_expire_minutes)
    return _encode({"sub": str(user["_id"]), "purpose": RESET_PURPOSE}, expires_delta)


def decode_token(token: str, purpose: str = ACCESS_PURPOSE) -> dict:
    """
    Decode and verify a token.

    Raises jwt.InvalidTokenError when the signature, expiry or purpose is wrong.
    """
    settings = get_settings()
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    if payload.get("purpose") != purpose:
        raise jwt.InvalidTokenError("Token purpose mismatch")
    return payload


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Database) -> dict:
    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise _credentials_exception("Token has expired")
    except jwt.InvalidTokenError:
        raise _credentials_exception()

    user_id = parse_object_id(payload.get("sub"))
    user = User.collection(db).find_one({"_id": user_id}) if user_id else None
    if user is None:
        raise _credentials_exception()
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db),
) -> dict:
    """Resolve the bearer token to the stored user document."""
    if credentials is None:
        raise _credentials_exception("Not authenticated")
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db),
) -> Optional[dict]:
    """Like get_current_user, but anonymous requests resolve to None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


def is_admin(user: Optional[dict]) -> bool:
    return bool(user) and user.get("role") == UserRole.ADMIN.value


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """Dependency that only lets admins through."""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin only.",
        )
    return current_user


def ensure_owner_or_admin(user: dict, owner_id) -> None:
    """Raise 403 unless ``user`` owns the document or is an admin."""
    if is_admin(user):
        return
    if owner_id is None or owner_id != user["_id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this resource",
        )
