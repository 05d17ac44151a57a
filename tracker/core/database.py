"""Core classes and mixins for DB connections"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, AsyncContextManager, Optional, cast

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from tracker.core import config

Base = declarative_base()
SessionMaker = Callable[[], AsyncContextManager[AsyncSession]]


class DatabaseManager:
    def __init__(
        self,
        engine: Optional[AsyncEngine] = None,
        settings: Optional[config.Settings] = None,
    ) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self.settings = settings or config.get_settings()
        self.engine = engine or self._create_engine()
        self._session_maker: Optional[SessionMaker] = None

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for the configured database."""
        url = self.settings.async_db_url
        if url.startswith("sqlite"):
            return create_async_engine(url, echo=self.settings.DEBUG)
        return create_async_engine(
            url,
            echo=self.settings.DEBUG,
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=5,
            max_overflow=10,
        )

    def get_session(self) -> SessionMaker:
        """Returns SessionMaker for database sessions."""
        if not self.engine:
            raise ValueError("Database engine wasn't initialized")

        if self._session_maker is None:
            self._session_maker = cast(
                SessionMaker,
                sessionmaker(
                    self.engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autocommit=False,
                    autoflush=False,
                ),
            )
        return self._session_maker

    @asynccontextmanager
    async def get_db(self) -> AsyncIterator[AsyncSession]:
        """Get database session context manager."""
        async_session = self.get_session()
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """Create all tables registered on Base."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()
