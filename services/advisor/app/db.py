from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from services.advisor.app.stores import AdvisorStore, SqlAdvisorStore


def create_engine(database_url: str) -> AsyncEngine:
    # NullPool avoids cross-event-loop pooled connections during tests and keeps behavior simple.
    return create_async_engine(database_url, pool_pre_ping=True, poolclass=NullPool)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_store(request: Request) -> AsyncIterator[AdvisorStore]:
    """One session per request; the advisor only reads."""
    async with request.app.state.sessionmaker() as session:
        yield SqlAdvisorStore(session)
