"""SQLAlchemy models."""

from authapi.models.enums import UserRole
from authapi.models.user import User

__all__ = [
    "User",
    "UserRole",
]
