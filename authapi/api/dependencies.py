"""FastAPI dependencies for authentication and services."""

from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from authapi.config import Settings, get_settings
from authapi.database import get_db
from authapi.errors import AuthError
from authapi.models.user import User
from authapi.services.auth import AuthService, decode_access_token, get_user_by_id
from authapi.services.email import EmailService

security = HTTPBearer(auto_error=False)

NOT_AUTHORIZED = "Not authorized to access this route"


def get_email_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> EmailService:
    """Get email service instance."""
    return EmailService(settings)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, settings, email_service)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    token: Annotated[str | None, Cookie()] = None,
) -> User:
    """Get the current user from the bearer token, falling back to the token cookie."""
    if credentials is not None:
        token = credentials.credentials
    if not token:
        raise AuthError(NOT_AUTHORIZED)

    payload = decode_access_token(token, settings)
    if payload is None or payload.get("sub") is None:
        raise AuthError(NOT_AUTHORIZED)

    try:
        user_id = int(payload["sub"])
    except ValueError as e:
        raise AuthError(NOT_AUTHORIZED) from e

    user = get_user_by_id(db, user_id)
    if user is None:
        raise AuthError(NOT_AUTHORIZED)

    return user
