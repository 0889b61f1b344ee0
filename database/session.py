"""
Async SQLAlchemy engine and session factory.

``Database`` is constructed once by the entry point, connected in the
application lifespan and disposed on shutdown.  Routes obtain a session
through ``get_db_session``, which reads the instance from ``app.state``.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from database.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and the session factory for one database URL."""

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs) -> None:
        self.url = url
        self._echo = echo
        self._engine_kwargs = engine_kwargs
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._engine

    async def connect(self, *, create_schema: bool = True) -> None:
        """Create the engine, check connectivity and create missing tables."""
        if self._engine is not None:
            return

        kwargs = dict(self._engine_kwargs)
        if self.url.startswith("postgresql"):
            kwargs.setdefault("pool_size", 10)
            kwargs.setdefault("max_overflow", 20)
            kwargs.setdefault("pool_recycle", 3600)

        engine = create_async_engine(self.url, echo=self._echo, **kwargs)
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception:
            await engine.dispose()
            logger.exception("Database connection failed")
            raise

        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Connected to database")

    async def dispose(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Disconnected from database")

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._session_factory()

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as exc:
            logger.warning("Database ping failed: %s", exc)
            return False


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`.

    Services commit explicitly; anything left uncommitted when the request
    fails is rolled back here.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
