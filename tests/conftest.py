"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("INGEST_SCHEDULE_ENABLED", "false")

import movie_catalog.models  # noqa: E402, F401
from movie_catalog.database import Base, configure_sqlite, get_db  # noqa: E402
from movie_catalog.main import app  # noqa: E402
from movie_catalog.models.user import User  # noqa: E402
from movie_catalog.utils.security import (  # noqa: E402
    AuthContext,
    create_access_token,
    hash_password,
)

TEST_PASSWORD = "Secret1!pass"


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """A fresh SQLite database file per test, with every table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session_factory: async_sessionmaker[AsyncSession]):
    """Factory inserting a user in its own committed transaction."""

    async def _make_user(username: str = "moviefan", email: str = "fan@example.com") -> User:
        async with session_factory() as session:
            user = User(
                username=username,
                hashed_password=hash_password(TEST_PASSWORD),
                first_name="Movie",
                last_name="Fan",
                email=email,
                created_at=datetime.now(UTC),
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def bearer():
    """Build an Authorization header for a user."""

    def _bearer(user: User) -> dict[str, str]:
        token = create_access_token(data={"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture
def user_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
async def user(make_user) -> User:
    return await make_user()


@pytest.fixture
def auth(user: User) -> AuthContext:
    return AuthContext.from_user(user)


@pytest.fixture
def auth_headers(user: User, bearer) -> dict[str, str]:
    return bearer(user)


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
