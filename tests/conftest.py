"""Test fixtures and configuration."""
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import taskmanager.models  # noqa: F401
from taskmanager.config import JwtSettings, Settings
from taskmanager.core.tokens import TokenIssuer
from taskmanager.database import Base
from taskmanager.main import create_app
from taskmanager.services.auth_service import AuthService
from taskmanager.stores.collection import InMemoryCollection
from taskmanager.stores.tasks import TaskOwnershipStore
from taskmanager.stores.users import USER_UNIQUE_FIELDS, UserStore

TEST_SECRET = "test-secret-key-minimum-32-characters-long"


@pytest.fixture(scope="session")
def jwt_settings() -> JwtSettings:
    """Token settings used across tests."""
    return JwtSettings(
        secret=TEST_SECRET,
        token_expiration_in_minutes=15,
        refresh_token_expiration_in_days=7,
    )


@pytest.fixture(scope="session")
def test_settings(jwt_settings) -> Settings:
    """Get test settings."""
    return Settings(
        database_url="sqlite:///:memory:",
        jwt=jwt_settings,
        environment="test",
        otel_enabled=False,
    )


@pytest.fixture(scope="function")
def db_engine(test_settings):
    """Create a test database engine."""
    engine = create_engine(
        test_settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine) -> sessionmaker:
    """Session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def client(test_settings, session_factory) -> Generator[TestClient, None, None]:
    """Create a test client."""
    app = create_app(test_settings, session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token_issuer(jwt_settings) -> TokenIssuer:
    return TokenIssuer(jwt_settings)


@pytest.fixture
def user_store() -> UserStore:
    """User store over an in-memory collection."""
    return UserStore(InMemoryCollection(unique_fields=USER_UNIQUE_FIELDS))


@pytest.fixture
def task_store() -> TaskOwnershipStore:
    """Task store over an in-memory collection."""
    return TaskOwnershipStore(InMemoryCollection())


@pytest.fixture
def auth_service(user_store, token_issuer) -> AuthService:
    return AuthService(user_store, token_issuer)


@pytest.fixture
def test_user_data():
    """Sample user data for testing."""
    return {
        "username": "testuser",
        "email": "testuser@example.com",
        "password": "TestPassword123!",
    }


@pytest.fixture
def test_task_data():
    """Sample task data for testing."""
    return {
        "title": "Test Task",
        "description": "This is a test task",
    }


@pytest.fixture
def register_and_login(client):
    """Register a user over HTTP and return its login response body."""

    def _register_and_login(username: str, password: str = "TestPassword123!") -> dict:
        response = client.post(
            "/api/auth/register",
            json={"username": username, "email": f"{username}@example.com", "password": password},
        )
        assert response.status_code == 201
        response = client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200
        return response.json()

    return _register_and_login


@pytest.fixture
def auth_headers(register_and_login) -> dict[str, str]:
    """Authorization headers for a freshly registered user."""
    tokens = register_and_login("testuser")
    return {"Authorization": f"Bearer {tokens['access_token']}"}
