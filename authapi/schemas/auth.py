"""Authentication schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from authapi.models.enums import UserRole

# bcrypt ignores everything past this many bytes
MAX_PASSWORD_BYTES = 72


def check_password_bytes(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_BYTES)
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)

    @field_validator("role")
    @classmethod
    def role_is_self_assignable(cls, value: UserRole) -> UserRole:
        if value not in UserRole.self_assignable():
            raise ValueError(f"Role '{value.value}' cannot be self-assigned")
        return value


class UserLogin(BaseModel):
    """User login request.

    Fields default to empty so that a missing value is reported by the login
    operation itself rather than by schema validation.
    """

    email: str = Field("", max_length=255)
    password: str = Field("", max_length=128)


class ForgotPasswordRequest(BaseModel):
    """Request a password reset email."""

    email: EmailStr = Field(..., max_length=255)


class ResetPasswordRequest(BaseModel):
    """New password submitted with a reset token."""

    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class UserDetailsUpdate(BaseModel):
    """Update the caller's name and/or email."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None


class PasswordUpdate(BaseModel):
    """Change the caller's password."""

    current_password: str = Field(..., alias="currentPassword", min_length=1, max_length=128)
    new_password: str = Field(
        ..., alias="newPassword", min_length=1, max_length=MAX_PASSWORD_BYTES
    )

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime


class TokenResponse(BaseModel):
    """Session token envelope."""

    success: bool = True
    token: str


class UserDataResponse(BaseModel):
    success: bool = True
    data: UserResponse


class MessageResponse(BaseModel):
    success: bool = True
    data: str | dict[str, Any]
