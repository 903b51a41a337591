"""Enums for model fields."""

from enum import Enum


class UserRole(str, Enum):
    """Authorization tag stored on each user."""

    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"

    @classmethod
    def self_assignable(cls) -> tuple["UserRole", ...]:
        """Roles a user may pick for themselves at registration."""
        return (cls.USER, cls.PUBLISHER)
