"""User model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Integer, String, func

from authapi.database import Base
from authapi.models.enums import UserRole


class User(Base):
    """Registered account with credentials and pending password-reset state."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e], name="userrole"),
        nullable=False,
        default=UserRole.USER,
    )
    password_hash = Column(String(255), nullable=False)
    # SHA-256 hex digest of the emailed secret; the secret itself is never stored
    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expire = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def set_reset_token(self, token_hash: str, expires_at: datetime) -> None:
        """Store a pending reset, replacing any earlier one."""
        self.password_reset_token = token_hash
        self.password_reset_expire = expires_at

    def clear_reset_token(self) -> None:
        self.password_reset_token = None
        self.password_reset_expire = None
