"""Shared pytest fixtures for the Food Van backends."""

import os

# Must be in place before foodvan reads its settings
os.environ.update({
    "ENV_MODE": "development",
    "DATABASE_URL": "sqlite+aiosqlite://",
    "JWT_SECRET": "test-secret",
    "BCRYPT_ROUNDS": "4",
})

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from foodvan.core.config import get_settings
from foodvan.database import Base, get_db
from foodvan.main import customer_app, vendor_app
from foodvan.services.security import reset_security_services
from foodvan.services.sessions import get_session_store, reset_session_store
import foodvan.models  # noqa: F401


@pytest.fixture(autouse=True)
def fresh_services():
    """Rebuild cached settings-driven services for every test."""
    get_settings.cache_clear()
    reset_security_services()
    reset_session_store()
    yield
    reset_session_store()


@pytest.fixture
async def engine():
    """Single-connection in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    """Session for seeding and inspecting the database directly."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def session_store():
    return get_session_store()


def _override_db(app, session_maker):
    async def _get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db


@pytest.fixture
async def customer_client(session_maker):
    _override_db(customer_app, session_maker)
    transport = ASGITransport(app=customer_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    customer_app.dependency_overrides.clear()


@pytest.fixture
async def vendor_client(session_maker):
    _override_db(vendor_app, session_maker)
    transport = ASGITransport(app=vendor_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    vendor_app.dependency_overrides.clear()
