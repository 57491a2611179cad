"""
InkPost Backend: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all
       tests. Environment variables are set before the first inkpost import
       so the settings singleton picks them up.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (service unit tests)
    ├── db_engine:       In-memory SQLite engine with all tables created
    ├── session_factory: Session factory bound to db_engine, patched into
    │                    inkpost.database so requests use it
    ├── client:          HTTPX AsyncClient wired to the FastAPI app
    ├── make_user:       Signs up a user through the API, returns a token
    └── sample_png_bytes: Minimal PNG payload for upload tests
"""

import os

# Override settings for testing BEFORE any inkpost imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-for-the-inkpost-suite-0123456789"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo"
os.environ["CLOUDINARY_API_KEY"] = "123456789012345"
os.environ["CLOUDINARY_API_SECRET"] = "test-api-secret"
os.environ["RETRY_MAX_ATTEMPTS"] = "2"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"

from typing import AsyncGenerator, Awaitable, Callable, Dict, Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

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

import inkpost.models  # noqa: E402,F401
from inkpost import database  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Service-level fixtures (no real database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        async def test_get_post(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = post
            result = await blog_service.get_post(mock_db_session, post_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_png_bytes() -> bytes:
    """PNG signature plus an IHDR chunk header; enough for MIME checks."""
    return b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02"


# ══════════════════════════════════════════════════════════════════════════
# Database and HTTP fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine, monkeypatch) -> async_sessionmaker:
    """Session factory for db_engine, also used by get_db_session and /health."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(database, "async_session_factory", factory)
    monkeypatch.setattr(database, "engine", db_engine)
    return factory


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient configured to talk to the FastAPI app.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from inkpost.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(client) -> Callable[..., Awaitable[str]]:
    """Returns `await make_user(email, password, name)` → bearer token."""

    async def _make_user(
        email: str = "ann@example.com",
        password: str = "correct horse",
        name: Optional[str] = "Ann",
    ) -> str:
        body: Dict[str, str] = {"email": email, "password": password}
        if name is not None:
            body["name"] = name
        response = await client.post("/api/v1/user/signup", json=body)
        assert response.status_code == 200, response.text
        return response.json()["jwt"]

    return _make_user


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def bearer() -> Callable[[str], Dict[str, str]]:
    """`bearer(token)` → Authorization header dict."""
    return auth_header
