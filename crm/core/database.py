# crm/core/database.py

"""
Database connection and session management of the application.

- Creates the async SQLModel/SQLAlchemy engine.
- Provides the session generator used as a FastAPI dependency.
- Provides a standalone session context for arq tasks.
- Creates the tables for development setups without migrations.
"""

import logging
from typing import AsyncGenerator, Any, Dict
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool options only apply to server databases; SQLite keeps its default pool."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_recycle": 3600,  # recycle connections after one hour
        "pool_size": 10,
        "max_overflow": 20,
    }


DATABASE_URL = settings.DATABASE_URL.get_secret_value()

engine: AsyncEngine = create_async_engine(
    DATABASE_URL,
    echo=settings.DEBUG_MODE,  # echo SQL only in debug mode
    future=True,
    **_engine_options(DATABASE_URL),
)

# Session factory for async sessions
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# =============================================================================
# Table creation (development only, production uses migrations)
# =============================================================================
async def create_db_and_tables() -> None:
    """
    Creates every table registered on SQLModel.metadata.
    Existing tables are left untouched.
    """
    # every table model has to be imported before create_all
    from crm.domains import models  # noqa: F401

    logger.info("Creating database tables (if missing)...")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables are ready.")


# =============================================================================
# Session dependencies
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async session generator for FastAPI dependency injection.
    A new session is opened per request and closed afterwards.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Standalone async session for arq tasks and scripts.
    Commits on success and rolls back on error.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
