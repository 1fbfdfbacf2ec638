"""
Pytest fixtures for Portfolio API tests.
"""

import os
import tempfile
from typing import AsyncGenerator

# Settings are cached on first use; point them at a throwaway database and
# cheap bcrypt before anything from the package is imported.
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp.name}"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.config import Settings, get_settings

get_settings.cache_clear()

from portfolio_api.database import build_engine, build_session_maker, get_db
from portfolio_api.kernel.identity import IdentityService, JWTManager
from portfolio_api.kernel.models import Base, User


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """A fresh file-backed SQLite database per test."""
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", debug=False)
    engine = build_engine(settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return build_session_maker(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


async def _register(session: AsyncSession, username: str) -> User:
    user = await IdentityService(session).register_user(
        username=username,
        email=f"{username}@example.com",
        password="secret123",
    )
    await session.commit()
    return user


@pytest_asyncio.fixture
async def alice(db_session: AsyncSession) -> User:
    return await _register(db_session, "alice")


@pytest_asyncio.fixture
async def bob(db_session: AsyncSession) -> User:
    return await _register(db_session, "bob")


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app, one session per request like production."""
    from portfolio_api.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)


def pytest_sessionfinish(session, exitstatus):
    try:
        if os.path.exists(_tmp.name):
            os.unlink(_tmp.name)
    except OSError:
        pass
