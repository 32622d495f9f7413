"""Async database session management with connection pooling"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from commission_gateway.config import settings
from commission_gateway.infrastructure.database.models import Base

# Connection pool: recycle after 1 hour to avoid stale connections
engine = create_async_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    pool_recycle=3600,
)

SessionLocal = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency injection for database sessions; closed on every exit path"""
    async with SessionLocal() as db:
        yield db


async def create_schema(bind: AsyncEngine = engine) -> None:
    """Create missing tables (no migrations)"""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
