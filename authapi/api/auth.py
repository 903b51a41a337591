"""Authentication API endpoints."""

from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from authapi.api.dependencies import get_auth_service, get_current_user
from authapi.config import Settings, get_settings
from authapi.models.user import User
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
from authapi.services.auth import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

TOKEN_COOKIE = "token"


def send_token_response(response: Response, token: str, settings: Settings) -> TokenResponse:
    """Set the session cookie and wrap the token in the response envelope."""
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        expires=datetime.now(UTC) + timedelta(days=settings.jwt_cookie_expire_days),
        httponly=True,
        secure=settings.is_production,
    )
    return TokenResponse(token=token)


@router.post("/register", response_model=TokenResponse)
async def register(
    user_data: UserRegister,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Register a new user."""
    token = service.register(user_data.name, user_data.email, user_data.password, user_data.role)
    return send_token_response(response, token, settings)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Login with email and password."""
    token = service.login(credentials.email, credentials.password)
    return send_token_response(response, token, settings)


@router.get("/me", response_model=UserDataResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return UserDataResponse(data=UserResponse.model_validate(current_user))


@router.get("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout by clearing the token cookie; the token itself stays valid until it expires."""
    response.delete_cookie(TOKEN_COOKIE, httponly=True)
    return MessageResponse(data={})


@router.post("/forgotpassword", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    request: Request,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Email a password reset link."""
    service.forgot_password(body.email, str(request.base_url))
    return MessageResponse(data="Email sent")


@router.put("/resetpassword/{resettoken}", response_model=TokenResponse)
async def reset_password(
    resettoken: str,
    body: ResetPasswordRequest,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Set a new password using an emailed reset token."""
    token = service.reset_password(resettoken, body.password)
    return send_token_response(response, token, settings)


@router.put("/updatedetails", response_model=UserDataResponse)
async def update_details(
    body: UserDetailsUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Update the current user's name and email."""
    user = service.update_details(current_user, name=body.name, email=body.email)
    return UserDataResponse(data=UserResponse.model_validate(user))


@router.put("/updatepassword", response_model=TokenResponse)
async def update_password(
    body: PasswordUpdate,
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Change the current user's password and issue a fresh token."""
    token = service.update_password(current_user, body.current_password, body.new_password)
    return send_token_response(response, token, settings)
