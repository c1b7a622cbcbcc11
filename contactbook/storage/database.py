"""
Async database engine and session factory.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from loguru import logger

from .models import Base


class Database:
    """
    Owns the async engine and the session factory.

    Usage:
        db = Database("sqlite+aiosqlite:///./contactbook.db")
        await db.create_tables()
        async with db.session() as session:
            ...
        await db.dispose()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(f"Database initialized: {url[:50]}")

    def session(self) -> AsyncSession:
        """Open a new session. Use as an async context manager."""
        return self._session_factory()

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()
