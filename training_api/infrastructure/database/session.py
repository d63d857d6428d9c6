"""
Database connection management.
Owns the async engine, the session factory and table provisioning.
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from training_api.core.logging import get_logger
from training_api.infrastructure.database.tables import Base

logger = get_logger(__name__)


class Database:
    """Async SQLAlchemy engine wrapper."""

    def __init__(self, url: str, echo: bool = False):
        """Initialize database wrapper without connecting."""
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self) -> None:
        """Create the engine, check the connection and provision tables."""
        if self._engine:
            return

        safe_url = make_url(self.url).render_as_string(hide_password=True)
        try:
            self._engine = create_async_engine(self.url, echo=self.echo, pool_pre_ping=True)
            self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

            async with self._engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)

            logger.info(f"Connected to database at {safe_url}")

        except Exception as e:
            logger.error(f"Failed to connect to database at {safe_url}: {e}")
            await self.disconnect()
            raise

    async def disconnect(self) -> None:
        """Dispose of the connection pool."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Disconnected from database")

    def session(self) -> AsyncSession:
        """
        Open a new session.

        Returns:
            AsyncSession: Session bound to the engine

        Raises:
            RuntimeError: If connect() has not been called
        """
        if not self._session_factory:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    async def ping(self) -> bool:
        """Check that the database answers."""
        if not self._engine:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False
