"""
Pydantic schemas for User and Authentication.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional
from vehicle_service.models.user import UserRole

PHONE_PATTERN = r"^\+?\d{10,15}$"
# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def _lower(cls, value: str) -> str:
    return value.lower()


def _password_length(cls, value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


def _optional_not_blank(cls, value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Field must not be empty")
    return value


class UserBase(BaseModel):
    """Base user schema with common fields."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    lower_email = field_validator("email")(_lower)


class UserCreate(UserBase):
    """Schema for signing up."""
    password: str = Field(..., min_length=6)

    password_length = field_validator("password")(_password_length)


class UserUpdate(BaseModel):
    """Schema for updating the caller's profile."""
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)

    name_not_blank = field_validator("name")(_optional_not_blank)


class User(UserBase):
    """Schema for user responses."""
    id: str
    role: UserRole = UserRole.USER
    created_at: Optional[datetime] = None


class Token(BaseModel):
    """Schema for an authentication response."""
    message: str
    token: str
    user: User


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    lower_email = field_validator("email")(_lower)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    lower_email = field_validator("email")(_lower)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    password_length = field_validator("new_password")(_password_length)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    password_length = field_validator("new_password")(_password_length)


class AccountResetRequest(BaseModel):
    """Schema for resetting an account by email and phone."""
    email: EmailStr
    phone: str = Field(..., min_length=1)

    lower_email = field_validator("email")(_lower)


class Message(BaseModel):
    message: str


class Count(BaseModel):
    count: int
