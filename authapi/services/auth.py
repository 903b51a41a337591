"""Authentication service for JWT, password and reset-token handling."""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from email_validator import EmailNotValidError, validate_email
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from authapi.config import Settings
from authapi.errors import AuthError, DeliveryError, NotFoundError, ValidationError
from authapi.models.enums import UserRole
from authapi.models.user import User
from authapi.services.email import EmailService

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

RESET_PASSWORD_PATH = "/api/v1/auth/resetpassword"
RESET_TOKEN_BYTES = 20


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


@lru_cache
def dummy_password_hash() -> str:
    """Hash checked against when no user matches, so both login failures cost a bcrypt round."""
    return pwd_context.hash(secrets.token_hex(16))


def normalize_email(email: str) -> str:
    """Normalize an address the way `EmailStr` does; invalid input is returned as is."""
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        return email


def hash_reset_token(token: str) -> str:
    """One-way digest under which a reset token is stored and looked up."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_reset_token() -> tuple[str, str]:
    """Return a fresh reset token and its stored digest."""
    token = secrets.token_hex(RESET_TOKEN_BYTES)
    return token, hash_reset_token(token)


def create_access_token(user_id: int, settings: Settings) -> str:
    """Create a signed session token for the user."""
    now = datetime.now(UTC)
    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict | None:
    """Decode and validate a session token."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


class AuthService:
    """Credential and session operations over the user store."""

    def __init__(self, db: Session, settings: Settings, email_service: EmailService) -> None:
        self.db = db
        self.settings = settings
        self.email_service = email_service

    def issue_token(self, user: User) -> str:
        return create_access_token(user.id, self.settings)

    def _commit_user(self, user: User) -> None:
        """Commit pending changes, reporting a taken email as bad input."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationError("Email already registered") from e
        self.db.refresh(user)

    def register(self, name: str, email: str, password: str, role: UserRole = UserRole.USER) -> str:
        """Create a user and return a session token for them."""
        if get_user_by_email(self.db, email):
            raise ValidationError("Email already registered")

        user = User(
            name=name,
            email=normalize_email(email),
            role=role,
            password_hash=get_password_hash(password),
        )
        self.db.add(user)
        self._commit_user(user)

        logger.info(f"Registered user {user.id} ({user.role.value})")
        return self.issue_token(user)

    def login(self, email: str, password: str) -> str:
        """Authenticate by email and password and return a session token.

        An unknown email and a wrong password produce the same error so the
        response does not reveal which accounts exist.
        """
        if not email or not password:
            raise ValidationError("Please provide both email and password")

        user = get_user_by_email(self.db, email)
        if user is None:
            verify_password(password, dummy_password_hash())
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            raise AuthError("Invalid credentials")

        return self.issue_token(user)

    def forgot_password(self, email: str, base_url: str) -> None:
        """Store a new reset token for the user and email them the reset link."""
        user = get_user_by_email(self.db, email)
        if not user:
            raise NotFoundError("No user exists with that email")

        token, token_hash = generate_reset_token()
        expires_at = datetime.now(UTC) + timedelta(minutes=self.settings.reset_token_expire_minutes)
        user.set_reset_token(token_hash, expires_at)
        self.db.commit()

        reset_url = f"{base_url.rstrip('/')}{RESET_PASSWORD_PATH}/{token}"
        message = (
            "You are receiving this email because you (or someone else) have requested "
            "to reset your password. Please make a PUT request to:\n\n"
            f"{reset_url}"
        )

        try:
            self.email_service.send_email(user.email, "Password reset token", message)
        except Exception as e:
            logger.error(f"Reset email for user {user.id} failed, clearing token: {e}")
            user.clear_reset_token()
            self.db.commit()
            raise DeliveryError("Email could not be sent") from e

        logger.info(f"Password reset requested for user {user.id}")

    def reset_password(self, reset_token: str, password: str) -> str:
        """Consume a reset token, set the new password and return a session token."""
        user = (
            self.db.query(User)
            .filter(
                User.password_reset_token == hash_reset_token(reset_token),
                User.password_reset_expire > datetime.now(UTC),
            )
            .first()
        )
        if not user:
            raise AuthError("Invalid token")

        user.password_hash = get_password_hash(password)
        user.clear_reset_token()
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Password reset completed for user {user.id}")
        return self.issue_token(user)

    def update_details(self, user: User, name: str | None = None, email: str | None = None) -> User:
        """Overwrite the given fields on the user's own record."""
        if email is not None:
            email = normalize_email(email)
        if email is not None and email != user.email:
            existing = get_user_by_email(self.db, email)
            if existing and existing.id != user.id:
                raise ValidationError("Email already registered")
            user.email = email
        if name is not None:
            user.name = name

        self._commit_user(user)
        return user

    def update_password(self, user: User, current_password: str, new_password: str) -> str:
        """Change the password after checking the current one; return a fresh token."""
        if not verify_password(current_password, user.password_hash):
            raise AuthError("Password is incorrect")

        user.password_hash = get_password_hash(new_password)
        self.db.commit()
        self.db.refresh(user)

        return self.issue_token(user)
