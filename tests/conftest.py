"""
Test Configuration and Fixtures

Every test that needs storage gets a fresh in-memory SQLite database
(aiosqlite behind a static pool) with the schema created, and optionally the
demo orders seeded.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing the app.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DB_POOL_MODE", "static")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "text")


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """
    Auto-assign tier markers:
    - tests/api/** => api
    - everything else => unit
    """
    for item in items:
        path = str(getattr(item, "fspath", ""))
        if item.get_closest_marker("api") or item.get_closest_marker("unit"):
            continue
        if "/tests/api/" in path or "\\tests\\api\\" in path:
            item.add_marker(pytest.mark.api)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Initialize the engine against a fresh in-memory database."""
    from jpashop.db import client as db_client

    await db_client.init_db()
    await db_client.create_schema()
    yield
    await db_client.drop_schema()
    await db_client.close_db()


@pytest_asyncio.fixture
async def seeded_orders(database):
    """The two demo orders (ids 1 and 2), committed."""
    from jpashop.db.client import get_db_session
    from jpashop.db.seed import seed_sample_orders

    async with get_db_session() as session:
        orders = await seed_sample_orders(session)
    return orders


@pytest_asyncio.fixture
async def db_session(database):
    """A unit of work for repository-level tests."""
    from jpashop.db.client import get_db_session

    async with get_db_session() as session:
        yield session


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================


@pytest.fixture
def app():
    """FastAPI application; lifespan is not run, the database fixture owns the engine."""
    from jpashop.api.main import app as fastapi_app

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app, database) -> AsyncGenerator[AsyncClient, None]:
    """Async client; unhandled errors come back as 500 responses."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
