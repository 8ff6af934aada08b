"""
Query Capability
================
The query interface the recovery core consumes, plus a SQLAlchemy
async implementation of it.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    create_async_engine as sa_create_async_engine,
    AsyncSession,
    async_sessionmaker,
    AsyncEngine,
)
import structlog

logger = structlog.get_logger(__name__)


class QueryExecutor(Protocol):
    """
    Executes a parameterized statement and returns its rows.
    
    Raises on failure; zero rows is an empty list, never an error.
    """
    
    async def execute(
        self,
        statement: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[Mapping[str, Any]]:
        ...


class SQLAlchemyQueryExecutor:
    """
    QueryExecutor backed by a SQLAlchemy async session factory.
    
    Usage:
        engine, factory = create_async_engine("postgresql+asyncpg://...")
        executor = SQLAlchemyQueryExecutor(factory)
        rows = await executor.execute("SELECT 1 AS one")
    """
    
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
    
    async def execute(
        self,
        statement: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        async with self._session_factory() as session:
            try:
                result = await session.execute(text(statement), dict(params or {}))
                rows = [dict(row) for row in result.mappings().all()] if result.returns_rows else []
                await session.commit()
                return rows
            except Exception:
                await session.rollback()
                raise


def create_async_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> "tuple[AsyncEngine, async_sessionmaker[AsyncSession]]":
    """
    Create the async engine and its session factory.
    
    Call this once during application startup.
    
    Args:
        database_url: Async connection string (postgresql+asyncpg://...)
        pool_size: Connection pool size (default: 10)
        max_overflow: Max overflow connections (default: 20)
        pool_pre_ping: Enable connection health checks (default: True)
        echo: Log SQL statements (default: False)
    
    Returns:
        Tuple of (engine, session_factory)
    """
    engine = sa_create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=pool_pre_ping,
        echo=echo,
    )
    
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    
    logger.info("Database engine initialized", pool_size=pool_size)
    return engine, session_factory
