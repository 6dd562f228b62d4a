"""
Database Module

Async SQLAlchemy engine, session factory and the declarative Base
shared by every model.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings

logger = logging.getLogger(__name__)

# ============================================================
# Engine & Session Factory
# ============================================================
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.SQLALCHEMY_ECHO,
    pool_pre_ping=True,
)

# expire_on_commit=False keeps loaded attributes usable after commit,
# async sessions cannot lazy-load them again
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


# ============================================================
# FastAPI Dependency
# ============================================================
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session for one request.

    The session is always closed when the request finishes.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# ============================================================
# Health Check
# ============================================================
async def check_db_connection() -> bool:
    """Return True if a trivial query succeeds."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
