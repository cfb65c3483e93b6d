"""
Database session and engine configuration.

This file sets up the async database connection using SQLAlchemy + asyncpg.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from crm_dedup.core.config import settings
from crm_dedup.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


# Create the async database engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # When DEBUG=True, prints SQL queries to console
    future=True,
)

# Create a session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keeps data accessible after commit
)

# Alias for dependencies
AsyncSessionLocal = async_session_maker


async def commit_session(session: AsyncSession) -> None:
    """Commit, reporting a store failure as StoreUnavailableError once the session is rolled back."""
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Commit failed, transaction rolled back", exc_info=True)
        raise StoreUnavailableError("Could not save changes, please retry") from exc


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.
    
    Used by FastAPI to provide a database connection to API endpoints.
    Work is committed when the request finishes and rolled back if it raised,
    so a failed merge or scan never leaves partial effects behind.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await commit_session(session)
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_async_session_context(
    session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Context manager helper for async DB sessions (used by the scan runner and tests)."""
    async with (session_maker or async_session_maker)() as session:
        try:
            yield session
            await commit_session(session)
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
