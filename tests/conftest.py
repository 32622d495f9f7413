"""Pytest fixtures for testing"""

from dataclasses import replace
from datetime import datetime
from typing import AsyncIterator, List

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from commission_gateway.api.dependencies import get_clock
from commission_gateway.api.main import create_app
from commission_gateway.config import Settings
from commission_gateway.domain.models import TransactionRecord
from commission_gateway.domain.rules import DEFAULT_RULES
from commission_gateway.infrastructure.database.session import create_schema, get_db


# Test database: one in-memory SQLite per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2026, 1, 1, 8, 1, 30, 250000)


class InMemoryStore:
    """Transaction store double assigning sequential ids"""

    def __init__(self):
        self.records: List[TransactionRecord] = []

    async def save(self, record: TransactionRecord) -> TransactionRecord:
        saved = replace(record, id=len(self.records) + 1)
        self.records.append(saved)
        return saved

    async def find_all(self) -> AsyncIterator[TransactionRecord]:
        for record in self.records:
            yield record


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def default_rules():
    return DEFAULT_RULES


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create test database schema"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_schema(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session bound to the test database"""
    TestingSessionLocal = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def app(db: AsyncSession) -> FastAPI:
    """FastAPI app wired to the test database and a fixed clock"""
    app = create_app(Settings(create_schema=False))

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client; unhandled errors come back as 500 responses"""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
