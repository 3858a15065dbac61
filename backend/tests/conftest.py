"""
AyurCare Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set before any `ayurcare` import so the
       settings singleton picks up a throwaway SQLite database, a test JWT
       secret, a known admin e-mail and a rate limit high enough never to trip.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── test_engine:     fresh SQLite schema per test (NullPool, aiosqlite)
    ├── db_session:      session on test_engine for seeding rows directly
    ├── test_client:     HTTPX AsyncClient wired to the app, DB dependency
    │                    overridden to use test_engine
    ├── customer / admin:  signed-up accounts with their bearer headers
    └── product / practitioner / service:  seeded catalogue and clinic rows
"""

import os
import tempfile
from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup (before any ayurcare import)
# ══════════════════════════════════════════════════════════════════════════

_TEST_DIR = tempfile.mkdtemp(prefix="ayurcare_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/bootstrap.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

from ayurcare import database  # noqa: E402
from ayurcare.database import Base, get_db_session  # noqa: E402
from ayurcare.main import app  # noqa: E402
from ayurcare.models import Practitioner, Product, Service  # noqa: E402

CUSTOMER_EMAIL = "asha@example.com"
ADMIN_EMAIL = "admin@example.com"
PASSWORD = "secret123"


def next_week() -> date:
    return date.today() + timedelta(days=7)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A stand-in AsyncSession for service tests that never touch a database.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database & Client Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_engine(tmp_path, monkeypatch):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path}/ayurcare.db",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # /health queries the module-level engine directly
    monkeypatch.setattr(database, "engine", engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def sign_up(client: AsyncClient, email: str, name: str = "Asha Verma") -> dict:
    response = await client.post(
        "/api/auth/signup",
        json={
            "name": name,
            "email": email,
            "phone": "9876543210",
            "address": "12 Lotus Lane, Pune",
            "password": PASSWORD,
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "user": body["user"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
    }


@pytest_asyncio.fixture
async def customer(test_client) -> dict:
    return await sign_up(test_client, CUSTOMER_EMAIL)


@pytest_asyncio.fixture
async def admin(test_client) -> dict:
    return await sign_up(test_client, ADMIN_EMAIL, name="Clinic Admin")


# ══════════════════════════════════════════════════════════════════════════
# Seed Data
# ══════════════════════════════════════════════════════════════════════════

async def add_product(session: AsyncSession, **overrides) -> Product:
    fields = {
        "name": "Ashwagandha Capsules",
        "description": "Adaptogenic herb for stress relief",
        "price": Decimal("12.50"),
        "stock_count": 10,
        "ingredients": "Withania somnifera root extract",
    }
    fields.update(overrides)
    product = Product(**fields)
    session.add(product)
    await session.commit()
    return product


@pytest_asyncio.fixture
async def product(db_session) -> Product:
    return await add_product(db_session)


@pytest_asyncio.fixture
async def practitioner(db_session) -> Practitioner:
    row = Practitioner(
        name="Dr. Meera Iyer",
        specialization="Panchakarma",
        bio="Fifteen years of clinical practice",
        email="meera@example.com",
        phone="9000000001",
    )
    db_session.add(row)
    await db_session.commit()
    return row


@pytest_asyncio.fixture
async def service(db_session) -> Service:
    row = Service(
        name="Abhyanga Massage",
        description="Full-body warm oil massage",
        price=Decimal("45.00"),
        duration_minutes=60,
    )
    db_session.add(row)
    await db_session.commit()
    return row
