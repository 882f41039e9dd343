"""Pytest configuration for all tests."""

import os
import tempfile

# Settings are read once and cached, so the test environment must be in
# place before anything from vidtube is imported.
os.environ["VIDTUBE_ENVIRONMENT"] = "testing"
os.environ["VIDTUBE_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["VIDTUBE_ACCESS_TOKEN_SECRET"] = "test-access-secret"
os.environ["VIDTUBE_REFRESH_TOKEN_SECRET"] = "test-refresh-secret"
os.environ["VIDTUBE_STORAGE_PATH"] = tempfile.mkdtemp(prefix="vidtube-media-")
os.environ["VIDTUBE_LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from vidtube.core.config import Settings, get_settings  # noqa: E402
from vidtube.infrastructure.auth import (  # noqa: E402
    TokenConfig,
    TokenIssuer,
    TokenVerifier,
    hash_password,
)
from vidtube.infrastructure.persistence import models  # noqa: E402,F401
from vidtube.infrastructure.persistence.database import Base  # noqa: E402
from vidtube.infrastructure.persistence.models import UserModel  # noqa: E402
from vidtube.infrastructure.storage import LocalStorageProvider  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def token_config(settings: Settings) -> TokenConfig:
    return TokenConfig.from_settings(settings)


@pytest.fixture
def issuer(token_config: TokenConfig) -> TokenIssuer:
    return TokenIssuer(token_config)


@pytest.fixture
def verifier(token_config: TokenConfig) -> TokenVerifier:
    return TokenVerifier(token_config)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def storage(settings: Settings, tmp_path) -> LocalStorageProvider:
    """Local media storage rooted in the test's temporary directory."""
    return LocalStorageProvider(settings.model_copy(update={"storage_path": str(tmp_path)}))


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    storage: LocalStorageProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client; each request gets its own database session.

    The base URL is https so that secure cookies are sent back.
    """
    from vidtube.infrastructure.api.app import app
    from vidtube.infrastructure.api.dependencies import get_storage_provider
    from vidtube.infrastructure.persistence.database import get_db_session

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_storage_provider] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="https://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def make_user(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[UserModel]]:
    """Factory inserting a user with a real Argon2 hash."""

    async def _make_user(
        username: str = "alice",
        email: str | None = None,
        password: str = "Secret1",
        full_name: str | None = None,
    ) -> UserModel:
        user = UserModel(
            username=username,
            email=email or f"{username}@example.com",
            full_name=full_name or username.title(),
            avatar=f"http://localhost:8000/media/avatars/{username}.png",
            password_hash=hash_password(password),
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login_as(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Log in through the API and return the response data (tokens and user)."""

    async def _login_as(username: str = "alice", password: str = "Secret1") -> dict:
        response = await client.post(
            "/api/v1/users/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _login_as
