"""Test configuration and fixtures."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENABLE_BACKGROUND_WORKERS", "false")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-token-secret")

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from factories import TEST_DATABASE_URL, create_schema, seed_agency, seed_package, seed_traveler
from travelsocial.core.database import Base
from travelsocial.core.dependencies import get_db
from travelsocial.models import *  # noqa: F403 - Import all models
from travelsocial.models import Agency, Package, Post, Traveler


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    await create_schema(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session):
    """Create a test FastAPI application without lifespan or observability."""
    from fastapi import FastAPI

    from travelsocial.main import register_exception_handlers, register_routers

    app = FastAPI(title="Travel Social API (Test)", version="1.0.0-test")

    register_exception_handlers(app)
    register_routers(app)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "travel-social-api", "environment": "test"}

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    from httpx import ASGITransport
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def agency(test_session) -> Agency:
    return await seed_agency(test_session, "northerntrails")


@pytest_asyncio.fixture
async def other_agency(test_session) -> Agency:
    return await seed_agency(test_session, "southerncoast")


@pytest_asyncio.fixture
async def traveler(test_session) -> Traveler:
    return await seed_traveler(test_session, "alice")


@pytest_asyncio.fixture
async def other_traveler(test_session) -> Traveler:
    return await seed_traveler(test_session, "bruno")


@pytest_asyncio.fixture
async def package(test_session, agency) -> Package:
    """A package with five slots owned by ``agency``."""
    return await seed_package(test_session, agency, max_slots=5)


@pytest_asyncio.fixture
async def post(test_session, traveler) -> Post:
    post = Post(owner_type=traveler.actor_type.value, owner_id=traveler.id, content="Hello from Reykjavik")
    test_session.add(post)
    await test_session.commit()
    await test_session.refresh(post)
    test_session.expunge(post)
    return post


@pytest.fixture
def sample_package_data():
    """Sample package creation payload."""
    start = datetime.now(timezone.utc) + timedelta(days=45)
    return {
        "title": "Fjord Kayaking Week",
        "description": "Paddle the western fjords",
        "main_location": "Norway",
        "price": 129900,
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=7)).isoformat(),
        "max_slots": 8,
    }
