"""Pytest configuration and fixtures for API integration tests.

The app runs inside TestClient's own event loop, so the database is a
file-backed SQLite with NullPool: no connection outlives the loop that
opened it. Tests are plain sync functions.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from apps.api.deps import get_db_session_factory, get_payment_gateway, get_settings
from apps.api.main import app
from core.data.models import Base
from core.infrastructure.adapters.payments import MockPaymentGateway
from core.infrastructure.database import build_session_factory


async def _create_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def api_session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orderflow.db'}", poolclass=NullPool)
    asyncio.run(_create_tables(engine))

    yield build_session_factory(engine)

    asyncio.run(engine.dispose())


@pytest.fixture
def api_catalog(api_session_factory, seeders) -> dict:
    return asyncio.run(seeders.catalog(api_session_factory))


@pytest.fixture
def gateway() -> MockPaymentGateway:
    return MockPaymentGateway()


@pytest.fixture
def test_client(api_session_factory, app_settings, gateway) -> TestClient:
    """FastAPI test client bound to the test database. Lifespan is not run."""
    app.dependency_overrides[get_db_session_factory] = lambda: api_session_factory
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
