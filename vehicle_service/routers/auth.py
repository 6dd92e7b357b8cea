"""
Authentication routes.
"""
import logging

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from vehicle_service.auth import (
    RESET_PURPOSE, create_access_token, create_reset_token, decode_token,
    get_current_user, hash_password, verify_password,
)
from vehicle_service.config import get_settings
from vehicle_service.database import get_db, parse_object_id, utcnow
from vehicle_service.models.user import User, UserRole
from vehicle_service.notification.email import send_password_reset
from vehicle_service.schemas.user import (
    ForgotPasswordRequest, LoginRequest, Message, ResetPasswordRequest, Token, UserCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, db: Database = Depends(get_db)):
    """
    Create a new account with the ``user`` role.
    """
    users = User.collection(db)
    if users.find_one({"email": user_in.email}):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists"
        )

    data = user_in.model_dump(exclude={"password"})
    doc = User.new(
        data,
        password_hash=hash_password(user_in.password),
        role=UserRole.USER.value,
    )
    try:
        doc["_id"] = users.insert_one(doc).inserted_id
    except DuplicateKeyError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists"
        )

    logger.info("User signed up: %s", doc["email"])
    return {
        "message": "User created successfully",
        "token": create_access_token(doc),
        "user": User.public(doc),
    }


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Database = Depends(get_db)):
    """
    Exchange email and password for a bearer token.
    """
    user = User.collection(db).find_one({"email": credentials.email})
    if not user or not verify_password(credentials.password, user["password_hash"]):
        logger.warning("Failed login for %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "message": "Login successful",
        "token": create_access_token(user),
        "user": User.public(user),
    }


@router.post("/logout", response_model=Message)
def logout():
    """Tokens are stateless; the client discards its copy."""
    return {"message": "Logged out successfully"}


@router.get("/verify")
def verify(current_user: dict = Depends(get_current_user)):
    """Return the user behind the presented token."""
    return {"user": User.public(current_user)}


@router.post("/forgot-password")
def forgot_password(payload: ForgotPasswordRequest, db: Database = Depends(get_db)):
    """
    Issue a password reset token and email the reset link.
    """
    user = User.collection(db).find_one({"email": payload.email})
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No account found with this email address"
        )

    token = create_reset_token(user)
    send_password_reset(user, token)

    response = {"message": "Password reset instructions sent to your email"}
    if get_settings().debug:
        response["reset_token"] = token
    return response


@router.post("/reset-password", response_model=Message)
def reset_password(payload: ResetPasswordRequest, db: Database = Depends(get_db)):
    """
    Set a new password using a reset token.
    """
    try:
        claims = decode_token(payload.token, purpose=RESET_PURPOSE)
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token"
        )

    user_id = parse_object_id(claims.get("sub"))
    result = User.collection(db).update_one(
        {"_id": user_id},
        {"$set": {"password_hash": hash_password(payload.new_password), "updated_at": utcnow()}},
    )
    if result.matched_count == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    logger.info("Password reset for user %s", user_id)
    return {"message": "Password has been reset successfully"}
