"""
Pytest configuration and fixtures.
Provides test database, client, and common test utilities.
"""

import os
import tempfile
from typing import Generator

# Settings are read at import time; these must be in place before the app loads.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DISABLE_BOOTSTRAP_USERS", "true")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{tempfile.mkdtemp()}/test.db")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from user_directory.core.config import settings  # noqa: E402
from user_directory.db.session import get_session  # noqa: E402
from user_directory.main import app  # noqa: E402
from user_directory.repositories.user_repository import UserRepository  # noqa: E402
from user_directory.schemas.user import UserResponse  # noqa: E402
from user_directory.services.user_service import UserService  # noqa: E402

TEST_PASSWORD = "SecurePass123!"


@pytest.fixture(name="engine")
def engine_fixture() -> Generator[Engine, None, None]:
    """
    In-memory SQLite engine shared across connections via StaticPool.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine: Engine) -> Generator[Session, None, None]:
    """
    Create a test database session.
    """
    with Session(engine) as session:
        yield session


@pytest.fixture(name="user_service")
def user_service_fixture(session: Session) -> UserService:
    return UserService(UserRepository(session))


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with dependency overrides.
    """

    def get_session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(name="user_payload")
def user_payload_fixture() -> dict:
    return {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@example.com",
        "password": TEST_PASSWORD,
        "dateOfBirth": "1990-01-01",
        "phoneNumber": "+1234567890",
    }


@pytest.fixture(name="test_user")
def test_user_fixture(user_service: UserService, user_payload: dict) -> UserResponse:
    """
    Create a test user.
    """
    return user_service.create(user_payload)


@pytest.fixture(name="user_token")
def user_token_fixture(client: TestClient, test_user: UserResponse) -> str:
    """
    Get an access token for the test user.
    """
    response = client.post(
        f"{settings.API_V1_PREFIX}/auth/login",
        data={"username": test_user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["access_token"]
