"""
Async SQLAlchemy engine and sessions for the pricing repository.

The engine is built on first use from DATABASE_URL, so importing the models
or the repository never opens a connection.
"""
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from roomrate.config import get_settings

_engine: Optional[AsyncEngine] = None
_session_maker: Optional[async_sessionmaker] = None

Base = declarative_base()


def _get_session_maker() -> async_sessionmaker:
    global _engine, _session_maker
    if _session_maker is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.sql_echo,
            poolclass=NullPool,
        )
        _session_maker = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
    return _session_maker


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    One unit of work. Callers commit their own writes; anything left
    uncommitted when an error escapes is rolled back.
    """
    async with _get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def close_db() -> None:
    """Dispose of the engine; the next session rebuilds it."""
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_maker = None
