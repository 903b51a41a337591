"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from authapi.api.dependencies import get_email_service
from authapi.config import get_settings
from authapi.database import Base, engine_options, get_db
from authapi.errors import DeliveryError
from authapi.main import app
from authapi.services.auth import decode_access_token

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_options(SQLALCHEMY_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "testpass123"


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class RecordingEmailService:
    """Stand-in for EmailService that keeps sent messages in memory."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False
        self.error: Exception | None = None

    def send_email(self, to: str, subject: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        if self.fail:
            raise DeliveryError(f"Could not send email to {to}")
        self.sent.append({"to": to, "subject": subject, "body": body})


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def mailer():
    return RecordingEmailService()


@pytest.fixture(scope="function")
def client(db, mailer):
    """Create a test client with database and mail overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client, settings):
    """Create a user and return bearer auth headers with user info."""
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Test User", "email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    token = response.json()["token"]
    user_id = int(decode_access_token(token, settings)["sub"])

    # Authenticate through the header only
    client.cookies.clear()

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=TEST_EMAIL)
