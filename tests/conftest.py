"""
Pytest configuration and fixtures.
Provides an in-memory database, seeded users, the invalidation bus and a
test HTTP client wired to the same database.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import uuid
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.main import app as fastapi_app
from app.core.invalidation import InvalidationBus
from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.deps.di_container import Container, set_container
from app.models.user import User, UserRole


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory SQLite engine with every table created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def test_session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """
    Create a test database session.
    Uses in-memory SQLite for fast tests.
    """
    async with test_session_maker() as session:
        yield session


@pytest.fixture(scope="function")
def bus():
    return InvalidationBus()


@pytest.fixture(scope="function")
def published(bus):
    """Every topic published on ``bus``, in order."""
    topics = []
    bus.subscribe("*", topics.append)
    return topics


async def _make_user(session: AsyncSession, role: UserRole, email: str, first_name: str) -> User:
    user = User(
        external_id=f"entra-{uuid.uuid4()}",
        email=email,
        first_name=first_name,
        last_name="Tester",
        role=role,
    )
    session.add(user)
    await session.commit()
    return user


@pytest.fixture(scope="function")
async def admin_user(test_db_session):
    return await _make_user(test_db_session, UserRole.ADMIN, "admin@lollyshoppe.test", "Ada")


@pytest.fixture(scope="function")
async def client_user(test_db_session):
    return await _make_user(test_db_session, UserRole.CLIENT, "client@example.com", "Cleo")


@pytest.fixture(scope="function")
async def other_client(test_db_session):
    return await _make_user(test_db_session, UserRole.CLIENT, "other@example.com", "Otto")


def _auth_headers(user: User) -> dict:
    token = create_access_token({
        "sub": user.external_id,
        "email": user.email,
        "given_name": user.first_name,
        "family_name": user.last_name,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def auth_headers():
    """Builds the bearer header for a user, as issued after Entra ID sign-in."""
    return _auth_headers


@pytest.fixture(scope="function")
async def test_client(test_session_maker):
    """
    Create a test HTTP client.
    Requests use the test database and a fresh DI container.
    """
    async def override_get_db():
        async with test_session_maker() as session:
            yield session

    container = Container()
    set_container(container)
    fastapi_app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    fastapi_app.dependency_overrides.clear()
    set_container(None)
