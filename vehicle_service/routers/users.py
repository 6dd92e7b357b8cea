"""
User account routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.database import Database

from vehicle_service.auth import (
    create_reset_token, get_current_user, hash_password, require_admin, verify_password,
)
from vehicle_service.database import get_db, utcnow
from vehicle_service.models.user import User
from vehicle_service.notification.email import send_password_reset
from vehicle_service.schemas.user import (
    AccountResetRequest, ChangePasswordRequest, Count, Message,
    User as UserSchema, UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserSchema)
def get_me(current_user: dict = Depends(get_current_user)):
    """Get the caller's profile."""
    return User.public(current_user)


@router.put("/me", response_model=UserSchema)
def update_me(
    user_update: UserUpdate,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Update the caller's name or phone.
    """
    # Update only provided fields
    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)
    if update_data:
        update_data["updated_at"] = utcnow()
        User.collection(db).update_one({"_id": current_user["_id"]}, {"$set": update_data})
        current_user = {**current_user, **update_data}
    return User.public(current_user)


@router.post("/change-password", response_model=Message)
def change_password(
    payload: ChangePasswordRequest,
    db: Database = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Change the caller's password after checking the current one.
    """
    if not verify_password(payload.current_password, current_user["password_hash"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    User.collection(db).update_one(
        {"_id": current_user["_id"]},
        {"$set": {"password_hash": hash_password(payload.new_password), "updated_at": utcnow()}},
    )
    logger.info("Password changed for %s", current_user["email"])
    return {"message": "Password changed successfully"}


@router.post("/reset", response_model=Message)
def reset_account(payload: AccountResetRequest, db: Database = Depends(get_db)):
    """
    Send a reset link to the account matching both email and phone.
    """
    user = User.collection(db).find_one({"email": payload.email, "phone": payload.phone})
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found with provided email and phone"
        )

    send_password_reset(user, create_reset_token(user))
    return {"message": "Reset instructions sent to your email"}


@router.get("/count", response_model=Count)
def count_users(
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """Total number of users (admin only)."""
    return {"count": User.collection(db).count_documents({})}
