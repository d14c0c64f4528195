"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from outreach.services.database import Base, get_db
from outreach.main import app


# Create in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a test database session."""
    async with TestSessionLocal() as session:
        yield session


@pytest.fixture
def override_get_db(db_session: AsyncSession):
    """Override the get_db dependency."""
    async def _override_get_db():
        yield db_session
    return _override_get_db


@pytest.fixture
async def client(override_get_db) -> AsyncGenerator[AsyncClient, None]:
    """Get async test client."""
    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_contact_data():
    """Sample contact data for tests."""
    return {
        "name": "Jon Smith",
        "email": "jon@smithco.com",
        "company": "Smith Co",
        "phone": "555-1234",
        "website": "https://smithco.com",
        "priority": "high",
        "notes": "Met at the conference",
        "tags": ["conference"],
    }


@pytest.fixture
def sample_sheet_rows():
    """Sheet rows as returned by the Sheets API, header first."""
    return [
        ["Name", "Email", "Company", "Phone", "Website", "Notes"],
        ["Alice Lee", "Alice@Partner.io", "Partner LLC", "(555) 123-4567", "", "Booth 12"],
        ["Bob Stone", "bob@stone.dev", "Stone Co", "", "stone.dev", ""],
        ["", "", "", "", "", ""],
        ["No Email", "", "Nowhere", "", "", ""],
        ["Bad Email", "not-an-email", "", "", "", ""],
    ]


@pytest.fixture
def sample_column_mapping():
    return {"name": 0, "email": 1, "company": 2, "phone": 3, "website": 4, "notes": 5}
