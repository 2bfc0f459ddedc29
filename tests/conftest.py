import os

# The engine module reads settings at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-min-32-chars")

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

from taskmatch.core.config import Settings
from taskmatch.database.database import get_session
from taskmatch.main import app
from taskmatch.models.enums import NgoStatus, TaskCategory, UserRole
from taskmatch.models.ngo import Ngo
from taskmatch.models.user import User
from taskmatch.services import task as task_service
from tests.factories import make_task_create, ngo_principal


# Test settings fixture
@pytest.fixture(scope="function")
def test_settings():
    """Provide test settings with mock values."""
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        SECRET_KEY="test-secret-key-for-testing-only-min-32-chars",
        ALGORITHM="HS256",
        ACCESS_TOKEN_EXPIRE_MINUTES=30,
        BACKEND_CORS_ORIGINS="",
    )


@pytest.fixture(scope="function")
def test_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="file_engine")
def file_engine_fixture(tmp_path):
    """File-backed SQLite engine, so sessions on different threads get their own connections."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'taskmatch.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(test_engine):
    """Provide a test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """TestClient whose requests share the test session."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def mock_session():
    """Provide a mock database session."""
    return MagicMock(spec=Session)


@pytest.fixture(name="user_factory")
def user_factory_fixture(session: Session):
    """Create persisted users with a unique email."""

    def create(role: UserRole = UserRole.VOLUNTEER, name: str = "Test User") -> User:
        unique = uuid.uuid4().hex[:8]
        user = User(name=name, email=f"{role.value}_{unique}@example.com", role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return create


@pytest.fixture(name="ngo_factory")
def ngo_factory_fixture(session: Session, user_factory):
    """Create an NGO user together with its NGO profile."""

    def create(status: NgoStatus = NgoStatus.APPROVED) -> Ngo:
        user = user_factory(role=UserRole.NGO, name="NGO Owner")
        ngo = Ngo(
            id_user=user.id_user,
            organization_name="Helping Hands",
            registration_number=f"REG-{uuid.uuid4().hex[:10]}",
            category=TaskCategory.COMMUNITY_SERVICE,
            description="Local community support organization",
            city="Springfield",
            state="IL",
            status=status,
            is_verified=status == NgoStatus.APPROVED,
        )
        session.add(ngo)
        session.commit()
        session.refresh(ngo)
        return ngo

    return create


@pytest.fixture(name="volunteer")
def volunteer_fixture(user_factory) -> User:
    return user_factory(role=UserRole.VOLUNTEER, name="Vera Volunteer")


@pytest.fixture(name="admin")
def admin_fixture(user_factory) -> User:
    return user_factory(role=UserRole.ADMIN, name="Platform Admin")


@pytest.fixture(name="approved_ngo")
def approved_ngo_fixture(ngo_factory) -> Ngo:
    return ngo_factory(NgoStatus.APPROVED)


@pytest.fixture(name="task_factory")
def task_factory_fixture(session: Session, approved_ngo: Ngo):
    """Create tasks owned by the approved NGO through the lifecycle controller."""

    def create(**overrides):
        return task_service.create_task(
            session, ngo_principal(approved_ngo), make_task_create(**overrides)
        )

    return create
