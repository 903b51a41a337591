"""Pydantic schemas for API requests and responses."""

from authapi.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    PasswordUpdate,
    ResetPasswordRequest,
    TokenResponse,
    UserDataResponse,
    UserDetailsUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserDetailsUpdate",
    "PasswordUpdate",
    "UserResponse",
    "TokenResponse",
    "UserDataResponse",
    "MessageResponse",
]
