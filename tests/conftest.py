"""
Pytest fixtures for testing.

Each test gets its own empty database. By default that is a SQLite file under
tmp_path (aiosqlite). Set TEST_USE_POSTGRES=1 to run against PostgreSQL in a
testcontainers-managed container instead.
"""
import os
from collections.abc import AsyncGenerator, Callable, Generator
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings
from core.security import create_token, hash_password
from db.session import configure_engine
from models import Base, Category, Section, User, UserRole

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="session")
def postgres_url() -> Generator[str | None]:
    """Start a PostgreSQL container for the session when TEST_USE_POSTGRES=1."""
    if os.environ.get("TEST_USE_POSTGRES") != "1":
        yield None
        return

    from testcontainers.postgres import PostgresContainer

    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        yield postgres.get_connection_url()


@pytest.fixture
def database_url(postgres_url: str | None, tmp_path) -> str:  # noqa: ANN001
    """Database URL for this test."""
    return postgres_url or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def test_settings(database_url: str) -> Settings:
    """Settings pointing at the test database, isolated from any local .env."""
    return Settings(
        _env_file=None,
        database_url=database_url,
        app_env="test",
        retention_days=30,
    )


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine with a freshly created schema."""
    engine = configure_engine(create_async_engine(database_url, echo=False))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session for the test.

    Services only flush, so everything a test does stays in one transaction that
    is discarded with the database.
    """
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


async def _create_user(
    db_session: AsyncSession,
    email: str,
    role: UserRole = UserRole.USER,
    is_disabled: bool = False,
) -> User:
    user = User(
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role.value,
        is_disabled=is_disabled,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a regular test user."""
    return await _create_user(db_session, "user@example.com")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second regular user for ownership tests."""
    return await _create_user(db_session, "other@example.com")


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin user."""
    return await _create_user(db_session, "admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
async def category(db_session: AsyncSession) -> Category:
    """Create a category with two sections ('Inbox' sortOrder 0, 'Reference' sortOrder 1)."""
    category = Category(name="General")
    db_session.add(category)
    await db_session.flush()
    db_session.add_all([
        Section(category_id=category.id, name="Inbox", sort_order=0),
        Section(category_id=category.id, name="Reference", sort_order=1),
    ])
    await db_session.flush()
    await db_session.refresh(category, attribute_names=["sections"])
    return category


@pytest.fixture
def section(category: Category) -> Section:
    """The 'Inbox' section of the test category."""
    return next(s for s in category.sections if s.name == "Inbox")


def auth_headers(user: User, settings: Settings) -> dict[str, str]:
    """Authorization header carrying a fresh access token for user."""
    token = create_token(str(user.id), user.role, "access", settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client_factory(
    db_session: AsyncSession,
    test_settings: Settings,
) -> Generator[Callable[..., AsyncClient]]:
    """
    Factory that creates test clients, authenticated as a given user (or anonymous).

    All clients share the test session, so data created through one is visible
    to the others and to the test body.
    """
    from api.main import app
    from core.config import get_settings
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_settings] = lambda: test_settings

    @asynccontextmanager
    async def _make(user: User | None = None) -> AsyncGenerator[AsyncClient]:
        headers = auth_headers(user, test_settings) if user is not None else {}
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers=headers,
        ) as test_client:
            yield test_client

    yield _make

    app.dependency_overrides.clear()


@pytest.fixture
async def client(client_factory, test_user: User) -> AsyncGenerator[AsyncClient]:  # noqa: ANN001
    """Client authenticated as test_user."""
    async with client_factory(test_user) as test_client:
        yield test_client


@pytest.fixture
async def admin_client(client_factory, admin_user: User) -> AsyncGenerator[AsyncClient]:  # noqa: ANN001
    """Client authenticated as admin_user."""
    async with client_factory(admin_user) as test_client:
        yield test_client


@pytest.fixture
async def anon_client(client_factory) -> AsyncGenerator[AsyncClient]:  # noqa: ANN001
    """Client without credentials."""
    async with client_factory(None) as test_client:
        yield test_client
